# conftest.py
"""
Pytest bootstrap for the booking service.

Puts the service source tree and the shared library on the import path and
points Django at the test settings before pytest-django configures it.
"""

import os
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
SERVICE_SRC = ROOT_DIR / 'services' / 'booking-service' / 'src'

for path in (str(SERVICE_SRC), str(ROOT_DIR)):
    if path not in sys.path:
        sys.path.insert(0, path)

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.testing')
