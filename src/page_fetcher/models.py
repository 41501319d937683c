"""Core datatypes used by fetchers, config, and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlsplit

DEFAULT_BASE_URL = "https://jsonmock.hackerrank.com/api/medical_records"
DEFAULT_PAGE = 1
QUERY_STYLES = ("legacy", "normalized")
FIELD_KINDS = ("int", "string", "array")


def is_http_url(url: str) -> bool:
    """Return True for an absolute http(s) URL with a host."""
    parsed = urlsplit(url)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


@dataclass(frozen=True, slots=True)
class PageRequest:
    """One paginated request: base URL plus 1-based page number."""

    base_url: str
    page: int

    def __post_init__(self) -> None:
        if not isinstance(self.base_url, str) or not is_http_url(self.base_url):
            raise ValueError(f"base_url 必须是绝对 http(s) URL: {self.base_url!r}")
        if isinstance(self.page, bool) or not isinstance(self.page, int):
            raise ValueError(f"page 必须是整数: {self.page!r}")
        if self.page < 1:
            raise ValueError("page 必须 >= 1")


@dataclass(frozen=True, slots=True)
class FieldRequest:
    """A field to extract from the fetched body."""

    kind: str
    key: str


@dataclass(slots=True)
class FetchConfig:
    """Runtime configuration for a single fetch."""

    base_url: str = DEFAULT_BASE_URL
    page: int = DEFAULT_PAGE
    timeout_sec: float | None = None
    query_style: str = "legacy"
    echo: bool = True
    fields: list[FieldRequest] = field(default_factory=list)
