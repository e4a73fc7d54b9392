"""
Turns every exception raised inside a DRF view into the error envelope:

    {"success": false, "message": "...", "errors": [{"field": "...", "message": "..."}]}
"""
import logging

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _flatten_errors(detail, field=None):
    """
    Flatten DRF's nested error detail (dicts, lists, ErrorDetail) into a list of
    {"field", "message"} entries. Nested fields are joined with dots.
    """
    errors = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            name = key if field is None else f"{field}.{key}"
            if key == 'non_field_errors':
                name = field
            errors.extend(_flatten_errors(value, name))
    elif isinstance(detail, list):
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                errors.extend(_flatten_errors(value, f"{field}.{index}" if field else str(index)))
            else:
                errors.extend(_flatten_errors(value, field))
    else:
        errors.append({'field': field, 'message': str(detail)})
    return errors


def envelope_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'view'}: {exc}")
        message = str(exc) if settings.DEBUG else 'Internal server error'
        return Response(
            {'success': False, 'message': message},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, ValidationError):
        errors = _flatten_errors(response.data)
        message = 'Validation failed'
        if len(errors) == 1 and errors[0]['field'] is None:
            message = errors[0]['message']
        response.data = {'success': False, 'message': message, 'errors': errors}
        return response

    detail = response.data.get('detail') if isinstance(response.data, dict) else response.data
    response.data = {'success': False, 'message': str(detail)}
    return response
