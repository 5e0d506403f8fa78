"""
Global exception handler for consistent API error responses.
Follows DRF convention and returns uniform structure.
"""
import logging
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import PermissionDenied, ValidationError as DjangoValidationError
from django.conf import settings

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns:
    { "detail": str, "code": str, "errors": dict (validation only) }
    """
    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(response.data, dict) and 'detail' not in response.data:
            # Serializer field errors: keep them under "errors"
            data = {'detail': 'Invalid input.', 'errors': response.data}
        elif isinstance(response.data, dict):
            data = response.data
        else:
            data = {'detail': _get_detail(exc), 'errors': response.data}
        data.setdefault('detail', _get_detail(exc))
        data.setdefault('code', _get_code(exc))
        data['detail'] = str(data['detail'])
        response.data = data
        return response

    if isinstance(exc, PermissionDenied):
        return Response(
            {'detail': str(exc) or 'Permission denied', 'code': 'permission_denied'},
            status=status.HTTP_403_FORBIDDEN
        )
    if isinstance(exc, DjangoValidationError):
        detail = exc.messages[0] if exc.messages else str(exc)
        return Response(
            {'detail': detail, 'code': 'validation_error'},
            status=status.HTTP_400_BAD_REQUEST
        )

    request = context.get('request') if context else None
    path = request.path if request else 'unknown'
    logger.exception('Unhandled exception on %s: %s', path, exc)
    error_detail = 'An internal error occurred.'
    if settings.DEBUG:
        error_detail = f'An internal error occurred: {str(exc)}'
    # Never expose stack traces to frontend; use standard API error format
    return Response(
        {'detail': error_detail, 'code': 'internal_error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def _get_detail(exc):
    if hasattr(exc, 'detail'):
        d = exc.detail
        if isinstance(d, list):
            return d[0] if d else 'Error'
        if isinstance(d, dict):
            return d.get('detail', 'Invalid input.')
        return str(d)
    return str(exc)


def _get_code(exc):
    codes = {
        'AuthenticationFailed': 'invalid_credentials',
        'NotAuthenticated': 'not_authenticated',
        'NotFound': 'not_found',
        'Http404': 'not_found',
        'PermissionDenied': 'permission_denied',
        'ValidationError': 'validation_error',
        'Conflict': 'conflict',
    }
    return codes.get(type(exc).__name__, 'error')
