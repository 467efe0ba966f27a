from __future__ import annotations

import math

from rest_framework.pagination import BasePagination
from rest_framework.response import Response

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _positive_int(raw, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


class PageLimitPagination(BasePagination):
    """``?page=&limit=`` pagination answering ``{<key>: [...], pagination: {...}}``.

    ``results_key`` names the list in the response body.
    """

    results_key = "results"

    def __init__(self, results_key: str | None = None):
        if results_key:
            self.results_key = results_key

    def paginate_queryset(self, queryset, request, view=None):
        self.page = _positive_int(request.query_params.get("page"), 1)
        self.limit = min(
            _positive_int(request.query_params.get("limit"), DEFAULT_PAGE_SIZE),
            MAX_PAGE_SIZE,
        )
        self.total = queryset.count()
        offset = (self.page - 1) * self.limit
        return list(queryset[offset : offset + self.limit])

    def get_paginated_response(self, data):
        return Response(
            {
                self.results_key: data,
                "pagination": {
                    "page": self.page,
                    "limit": self.limit,
                    "total": self.total,
                    "pages": math.ceil(self.total / self.limit),
                },
            }
        )
