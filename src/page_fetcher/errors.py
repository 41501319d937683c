"""Error types."""

from __future__ import annotations


class FetchError(Exception):
    """Failure to complete the HTTP request/response cycle."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.cause = cause
