"""
Error types and the DRF exception handler.

Services raise :class:`AppError` with an HTTP status and a message;
the handler below turns it (and everything else DRF or Django may
raise) into the uniform ``{success, message, errors?}`` envelope.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.db import IntegrityError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler as drf_exception_handler

from .responses import err

logger = logging.getLogger(__name__)


class AppError(APIException):
    """Operational error with an explicit HTTP status."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request failed'

    def __init__(self, status_code: int, message: str):
        super().__init__(detail=message)
        self.status_code = status_code
        self.message = message


def _flatten_errors(detail, prefix: str = '') -> list[dict]:
    """Turn a serializer ``detail`` tree into ``[{field, message}]``."""
    out: list[dict] = []
    if isinstance(detail, dict):
        for key, value in detail.items():
            field = f"{prefix}.{key}" if prefix else str(key)
            out.extend(_flatten_errors(value, field))
    elif isinstance(detail, list):
        for i, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                out.extend(_flatten_errors(value, f"{prefix}.{i}" if prefix else str(i)))
            else:
                out.append({'field': prefix or 'non_field_errors', 'message': str(value)})
    else:
        out.append({'field': prefix or 'non_field_errors', 'message': str(detail)})
    return out


def _detail_message(data) -> str:
    if isinstance(data, dict):
        detail = data.get('detail', data)
        return str(detail)
    if isinstance(data, list) and data:
        return str(data[0])
    return str(data)


def api_exception_handler(exc, context):
    if isinstance(exc, IntegrityError):
        logger.info("integrity error: %s", exc)
        return err('Resource already exists', status=status.HTTP_409_CONFLICT)
    if isinstance(exc, ObjectDoesNotExist):
        return err('Resource not found', status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, AppError):
        return err(exc.message, status=exc.status_code)
    if isinstance(exc, ValidationError):
        return err('Validation failed', status=status.HTTP_400_BAD_REQUEST, errors=_flatten_errors(exc.detail))
    if isinstance(exc, Http404):
        return err('Resource not found', status=status.HTTP_404_NOT_FOUND)

    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception("unhandled error in %s", context.get('view'), exc_info=exc)
        message = str(exc) if settings.DEBUG else 'Internal server error'
        return err(message, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    out = err(_detail_message(resp.data), status=resp.status_code)
    # keep WWW-Authenticate / Retry-After set by DRF
    for header in ('WWW-Authenticate', 'Retry-After'):
        if header in resp:
            out[header] = resp[header]
    return out
