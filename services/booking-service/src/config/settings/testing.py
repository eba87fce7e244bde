"""
Test Settings

Django settings for running tests.
"""

from .base import *

DEBUG = False
TESTING = True

# Use in-memory SQLite for faster tests
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

TIME_ZONE = 'UTC'

JWT_SETTINGS = {
    **JWT_SETTINGS,
    'SIGNING_KEY': 'test-signing-key',
    'VERIFYING_KEY': 'test-signing-key',
}

LOGGING['handlers']['console']['formatter'] = 'standard'
LOGGING['root']['level'] = 'WARNING'
