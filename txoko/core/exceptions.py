"""API error shaping.

DRF renders ``{"detail": ...}``; the frontend reads ``message`` so both keys
are returned for non-field errors.
"""

from __future__ import annotations

import logging

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class SocietyMissingError(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = _("User is not attached to a society.")
    default_code = "society_missing"


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and "detail" in data and "message" not in data:
        data["message"] = str(data["detail"])
    if response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        view = context.get("view")
        logger.error("API error in %s: %s", type(view).__name__, exc)
    return response


def error_response(message: str, status_code: int) -> Response:
    """Error body for views that answer directly instead of raising."""
    return Response({"detail": message, "message": message}, status=status_code)
