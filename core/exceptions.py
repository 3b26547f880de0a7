"""
Error taxonomy shared by every farm service.

Services raise these exceptions; the DRF exception handler at the bottom of
this module turns them into the JSON error shape used by the API:

    {"error": "<message>", "code": "<kind>", "details": {...}}

Kinds:
- validation_error   -> 400
- not_found          -> 404
- conflict           -> 409 (invalid_status_transition, order_number_collision)
- persistence_error  -> 500
"""

import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class FarmServiceError(Exception):
    """Base class for errors raised by the service layer."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = 'server_error'
    default_message = 'An unexpected error occurred'

    def __init__(self, message=None, details=None, code=None):
        self.message = message or self.default_message
        self.details = details
        self.code = code or self.default_code
        super().__init__(self.message)

    def as_dict(self):
        data = {'error': self.message, 'code': self.code}
        if self.details:
            data['details'] = self.details
        return data


class ValidationFailed(FarmServiceError):
    """Missing or malformed input. Raised before any write is attempted."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = 'validation_error'
    default_message = 'Validation failed'


class NotFound(FarmServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = 'not_found'
    default_message = 'Resource not found'


class Conflict(FarmServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_code = 'conflict'
    default_message = 'Resource conflict'


class InvalidStatusTransition(Conflict):
    default_code = 'invalid_status_transition'
    default_message = 'Invalid status transition'


class PersistenceError(FarmServiceError):
    default_code = 'persistence_error'
    default_message = 'A database error occurred. Please try again later.'


# =============================================================================
# DRF EXCEPTION HANDLER
# =============================================================================

def _persistence_response(exc):
    body = PersistenceError().as_dict()
    if settings.DEBUG:
        body['details'] = {'exception': exc.__class__.__name__, 'message': str(exc)}
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def farm_exception_handler(exc, context):
    """
    Render service errors, Django validation errors and storage failures
    in the API error shape. Everything else goes through DRF's handler and
    is reshaped afterwards.
    """
    view = context.get('view')
    view_name = view.__class__.__name__ if view is not None else 'unknown view'

    if isinstance(exc, FarmServiceError):
        if exc.status_code >= 500:
            logger.error(f"{view_name}: {exc.message}", exc_info=exc)
        else:
            logger.warning(f"{view_name}: {exc.code}: {exc.message}")
        return Response(exc.as_dict(), status=exc.status_code)

    if isinstance(exc, DjangoValidationError):
        details = exc.message_dict if hasattr(exc, 'error_dict') else {'non_field_errors': exc.messages}
        return Response(
            ValidationFailed(details=details).as_dict(),
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, DatabaseError):
        logger.error(f"{view_name}: database error", exc_info=exc)
        return _persistence_response(exc)

    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and 'detail' in data and len(data) == 1:
        detail = data['detail']
        response.data = {
            'error': str(detail),
            'code': getattr(detail, 'code', None) or 'error',
        }
    elif response.status_code == status.HTTP_400_BAD_REQUEST:
        response.data = {
            'error': ValidationFailed.default_message,
            'code': ValidationFailed.default_code,
            'details': data,
        }
    return response
