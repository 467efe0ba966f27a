from __future__ import annotations

import logging

from django.shortcuts import render

logger = logging.getLogger(__name__)

ERROR_TEMPLATE = "error.html"


class ErrorBoundaryMiddleware:
    """Render uncaught page errors as ``error.html`` with a retry link.

    API paths are left to DRF's exception handling.
    """

    api_prefix = "/api/"

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if request.path.startswith(self.api_prefix):
            return None
        logger.exception("Unhandled error rendering %s", request.path)
        return render(
            request,
            ERROR_TEMPLATE,
            {
                "message": str(exception) or exception.__class__.__name__,
                "retry_url": request.get_full_path(),
            },
            status=500,
        )
