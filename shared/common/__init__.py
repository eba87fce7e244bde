# Shared Common Library for the Facility Booking Service
# Cross-cutting API pieces: error envelope, authentication, permissions,
# middleware and pagination.

__version__ = "1.0.0"
