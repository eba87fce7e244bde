# shared/common/middleware.py
"""
Request Middleware
"""

import logging
import time
import uuid
from typing import Callable

from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

UNLOGGED_PATHS = ('/health/', '/health/ready/')


class RequestIDMiddleware:
    """
    Middleware that adds a unique request ID to each request.
    The ID is echoed in the response and in error envelopes.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())
        request.request_id = request_id

        response = self.get_response(request)
        response['X-Request-ID'] = request_id

        return response


class LoggingMiddleware:
    """
    Middleware that logs request start and completion with duration.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.path in UNLOGGED_PATHS:
            return self.get_response(request)

        request_id = getattr(request, 'request_id', None)
        started = time.monotonic()

        logger.info(
            f"Request started: {request.method} {request.path}",
            extra={
                'request_id': request_id,
                'method': request.method,
                'path': request.path,
                'ip_address': self.get_client_ip(request),
            }
        )

        response = self.get_response(request)
        duration_ms = round((time.monotonic() - started) * 1000, 2)

        log_method = logger.warning if response.status_code >= 400 else logger.info
        log_method(
            f"Request completed: {request.method} {request.path} - {response.status_code}",
            extra={
                'request_id': request_id,
                'method': request.method,
                'path': request.path,
                'status_code': response.status_code,
                'duration_ms': duration_ms,
            }
        )

        response['X-Response-Time'] = f"{duration_ms:.2f}ms"
        return response

    def get_client_ip(self, request: HttpRequest) -> str:
        """Extract client IP from request"""
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR', '')
