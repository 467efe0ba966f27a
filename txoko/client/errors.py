from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """An API request that failed or answered with a non-2xx status.

    ``status`` is 0 when no HTTP response was received at all.
    """

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        return f"{self.status}: {self.message}" if self.status else self.message


class ErrorDisplay:
    """Failure shown to the user with a single retry affordance.

    ``retry()`` calls ``on_retry`` when given, otherwise ``reload`` (which
    re-runs the whole operation, like reloading a page).
    """

    def __init__(
        self,
        error: BaseException,
        on_retry: Callable[[], object] | None = None,
        reload: Callable[[], object] | None = None,
    ):
        self.error = error
        self.on_retry = on_retry
        self.reload = reload

    @property
    def message(self) -> str:
        return getattr(self.error, "message", None) or str(self.error)

    def retry(self):
        if self.on_retry is not None:
            return self.on_retry()
        if self.reload is not None:
            return self.reload()
        logger.debug("Retry requested without a retry or reload action")
        return None

    def render(self) -> str:
        return f"Error: {self.message}\n[Try again]"
