"""
Custom Exception Handler for API

Every error leaves the API as {"success": false, "message": ..., "errors"?: [...]},
with "details" and "stack" added only when DEBUG is on.
"""
import logging
import traceback

import jwt
from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.db.models import ProtectedError, RestrictedError
from django.http import Http404, JsonResponse
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.core.exceptions import StorefrontException, ValidationException

logger = logging.getLogger(__name__)


def flatten_errors(detail, prefix: str = '') -> list:
    """
    Turn DRF's nested error dict/list into a flat list of {field, message} pairs.
    """
    errors = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            field = f"{prefix}.{key}" if prefix else str(key)
            if key == 'non_field_errors':
                field = prefix or 'non_field_errors'
            errors.extend(flatten_errors(value, field))
    elif isinstance(detail, list):
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                errors.extend(flatten_errors(value, f"{prefix}[{index}]"))
            else:
                errors.append({'field': prefix, 'message': str(value)})
    else:
        errors.append({'field': prefix, 'message': str(detail)})
    return errors


def _error_response(status_code: int, message: str, errors: list = None, exc: Exception = None) -> Response:
    body = {'success': False, 'message': message}
    if errors:
        body['errors'] = errors
    if settings.DEBUG and exc is not None:
        body['details'] = repr(exc)
        body['stack'] = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return Response(body, status=status_code)


def _integrity_response(exc: IntegrityError) -> Response:
    text = str(exc).lower()
    if 'unique' in text or 'duplicate' in text:
        return _error_response(status.HTTP_409_CONFLICT, 'Resource already exists', exc=exc)
    if 'foreign key' in text:
        return _error_response(status.HTTP_400_BAD_REQUEST, 'Invalid reference to related resource', exc=exc)
    return _error_response(status.HTTP_400_BAD_REQUEST, 'Database constraint violated', exc=exc)


def _log_context(context) -> str:
    request = context.get('request')
    if request is None:
        return ''
    user = getattr(request, 'user', None)
    user_id = getattr(user, 'id', None) if user is not None else None
    return f"{request.method} {request.path} user={user_id}"


def custom_exception_handler(exc, context):
    """
    Map application, ORM, JWT and DRF errors onto the error envelope.
    """
    where = _log_context(context)

    if isinstance(exc, StorefrontException):
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        logger.log(level, f"{exc.code}: {exc.message} [{where}]")
        errors = exc.errors if isinstance(exc, ValidationException) else None
        return _error_response(exc.status_code, exc.message, errors, exc)

    if isinstance(exc, (ProtectedError, RestrictedError)):
        logger.warning(f"Delete blocked by related rows: {exc} [{where}]")
        return _error_response(
            status.HTTP_400_BAD_REQUEST, 'Resource is referenced by other records and cannot be deleted', exc=exc
        )

    if isinstance(exc, IntegrityError):
        logger.warning(f"Integrity error: {exc} [{where}]")
        return _integrity_response(exc)

    if isinstance(exc, ObjectDoesNotExist):
        exc = Http404(str(exc))

    if isinstance(exc, DjangoValidationError):
        logger.warning(f"Model validation error: {exc} [{where}]")
        detail = exc.message_dict if hasattr(exc, 'error_dict') else {'non_field_errors': exc.messages}
        return _error_response(status.HTTP_400_BAD_REQUEST, 'Validation failed', flatten_errors(detail), exc)

    if isinstance(exc, jwt.PyJWTError):
        logger.warning(f"JWT error: {exc} [{where}]")
        return _error_response(status.HTTP_401_UNAUTHORIZED, 'Invalid token', exc=exc)

    # Call REST framework's default exception handler for DRF and Http404 errors
    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, exceptions.ValidationError):
            message, errors = 'Validation failed', flatten_errors(exc.detail)
        elif isinstance(exc, exceptions.ParseError):
            message, errors = 'Malformed request body', None
        elif isinstance(exc, Http404):
            message, errors = 'Resource not found', None
        else:
            detail = response.data.get('detail') if isinstance(response.data, dict) else response.data
            message, errors = str(detail), None

        logger.warning(f"{response.status_code} {message} [{where}]")
        error = _error_response(response.status_code, message, errors, exc)
        for header in ('WWW-Authenticate', 'Retry-After'):
            if header in response:
                error[header] = response[header]
        return error

    # Handle unexpected exceptions
    logger.exception(f"Unhandled exception: {exc} [{where}]")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, 'Internal server error', exc=exc)


def not_found_handler(request, exception=None):
    """JSON 404 for routes that do not exist."""
    return JsonResponse(
        {'success': False, 'message': f"Route {request.path} not found"},
        status=status.HTTP_404_NOT_FOUND,
    )


def server_error_handler(request):
    return JsonResponse(
        {'success': False, 'message': 'Internal server error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
