from __future__ import annotations

import logging

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from competitions.exceptions import Conflict

logger = logging.getLogger(__name__)


def _flatten(detail) -> str:
    if isinstance(detail, dict):
        return "; ".join(f"{key}: {_flatten(value)}" for key, value in detail.items())
    if isinstance(detail, list):
        return "; ".join(_flatten(item) for item in detail)
    return str(detail)


def _message(exc) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(exc.messages)
    if isinstance(exc, drf_exceptions.ValidationError):
        return _flatten(exc.detail)
    return str(exc)


def competition_exception_handler(exc, context):
    """Engine errors -> 400/404/409 with ``{"detail", "code"}``; the rest goes to DRF."""
    if isinstance(exc, Conflict):
        code, http_status = "conflict", status.HTTP_409_CONFLICT
    elif isinstance(exc, ObjectDoesNotExist):
        code, http_status = "not_found", status.HTTP_404_NOT_FOUND
    elif isinstance(exc, (ValidationError, drf_exceptions.ValidationError)):
        code, http_status = "invalid_input", status.HTTP_400_BAD_REQUEST
    else:
        return exception_handler(exc, context)

    view = context.get("view")
    logger.info(
        "api.error view=%s code=%s detail=%s",
        type(view).__name__ if view else "-",
        code,
        _message(exc),
    )
    return Response({"detail": _message(exc), "code": code}, status=http_status)
