# shared/common/exceptions.py
"""
API Errors

All failures leave the API in one envelope:

    {"success": false, "error": {"code", "message", "details", "request_id"}}

Booking engine errors reach the views as ``BookingError`` values and are
raised through ``apps.api.messages``; anything else that escapes a view is
translated by ``custom_exception_handler``.
"""

import logging
import traceback
from typing import Any, Dict, Optional

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import InterfaceError, OperationalError
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


STATUS_CODES = {
    400: 'BAD_REQUEST',
    401: 'UNAUTHORIZED',
    403: 'FORBIDDEN',
    404: 'NOT_FOUND',
    405: 'METHOD_NOT_ALLOWED',
    409: 'CONFLICT',
    429: 'RATE_LIMITED',
}


# =============================================================================
# API EXCEPTIONS
# =============================================================================

class BaseAPIException(APIException):
    """API error with a machine-readable ``error_code`` and optional details."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'An unexpected error occurred.'
    default_code = 'error'
    error_code = 'INTERNAL_ERROR'

    def __init__(self, detail: Optional[str] = None, error_code: Optional[str] = None,
                 details: Any = None):
        super().__init__(detail=detail)
        if error_code:
            self.error_code = error_code
        self.details = details


class BadRequestException(BaseAPIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The request is invalid.'
    default_code = 'bad_request'
    error_code = 'BAD_REQUEST'


class ForbiddenException(BaseAPIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You are not allowed to change this reservation.'
    default_code = 'forbidden'
    error_code = 'FORBIDDEN'


class NotFoundException(BaseAPIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'The requested resource was not found.'
    default_code = 'not_found'
    error_code = 'NOT_FOUND'


class ConflictException(BaseAPIException):
    """Overlapping bookings and disallowed status changes."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The request conflicts with existing bookings.'
    default_code = 'conflict'
    error_code = 'CONFLICT'


class ServiceUnavailableException(BaseAPIException):
    """Reservation storage could not be reached; clients may retry."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'The service is temporarily unavailable. Please try again.'
    default_code = 'service_unavailable'
    error_code = 'STORAGE_UNAVAILABLE'


# =============================================================================
# EXCEPTION HANDLER
# =============================================================================

def custom_exception_handler(exc, context) -> Optional[Response]:
    """DRF exception handler producing the common error envelope."""
    request = context.get('request')
    request_id = getattr(request, 'request_id', None)

    if isinstance(exc, (OperationalError, InterfaceError)):
        logger.error(f"Database unavailable: {exc}", extra={'request_id': request_id})
        exc = ServiceUnavailableException()
    elif isinstance(exc, ProtectedError):
        exc = ConflictException('The resource is still referenced by reservations.')

    response = exception_handler(exc, context)
    if response is not None:
        return format_error_response(exc, response, request_id)

    if isinstance(exc, DjangoValidationError):
        errors = getattr(exc, 'message_dict', None) or {'detail': exc.messages}
        return Response(
            _envelope('VALIDATION_ERROR', 'Validation error', request_id, errors),
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, Http404):
        return Response(
            _envelope('NOT_FOUND', str(exc) or 'Resource not found', request_id),
            status=status.HTTP_404_NOT_FOUND
        )

    logger.exception(
        f"Unhandled {type(exc).__name__}: {exc}",
        extra={'request_id': request_id}
    )

    body = _envelope('INTERNAL_ERROR', 'An unexpected error occurred.', request_id)
    if settings.DEBUG:
        body['error']['message'] = str(exc)
        body['error']['details'] = {
            'type': type(exc).__name__,
            'traceback': traceback.format_exc().splitlines(),
        }
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def format_error_response(exc, response: Response, request_id: str = None) -> Response:
    """Rewrite a DRF error response into the common envelope."""
    code = getattr(exc, 'error_code', None) or STATUS_CODES.get(response.status_code, 'ERROR')
    details = getattr(exc, 'details', None)

    # Serializer field errors
    if details is None and isinstance(response.data, dict) and 'detail' not in response.data:
        details = response.data

    response.data = _envelope(code, get_error_message(exc, response), request_id, details)
    return response


def get_error_message(exc, response: Response) -> str:
    detail = getattr(exc, 'detail', None)
    if isinstance(detail, str):
        return str(detail)
    if isinstance(detail, list) and detail:
        return str(detail[0])
    if isinstance(detail, dict):
        return 'Validation error' if 'detail' not in detail else str(detail['detail'])

    if isinstance(response.data, dict):
        return str(response.data.get('detail', response.data))
    return str(response.data)


def _envelope(code: str, message: str, request_id=None, details=None) -> Dict[str, Any]:
    return {
        'success': False,
        'error': {
            'code': code,
            'message': message,
            'details': details,
            'request_id': request_id,
        }
    }
