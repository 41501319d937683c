"""Helpers for building paginated request URLs."""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from .models import QUERY_STYLES


def build_page_url(base_url: str, page: int, style: str = "legacy") -> str:
    """Append the page parameter to base_url.

    ``legacy`` keeps the historical ``?&page=<n>`` suffix verbatim, which the
    upstream API tolerates. ``normalized`` drops any existing ``page`` pairs and
    appends ``page=<n>`` with a single separator; other pairs are kept byte for
    byte, without re-encoding.
    """
    if style not in QUERY_STYLES:
        raise ValueError(f"query_style 必须是以下之一: {', '.join(QUERY_STYLES)}")
    if style == "legacy":
        return f"{base_url}?&page={page}"

    parsed = urlsplit(base_url)
    pairs = [
        pair for pair in parsed.query.split("&") if pair and pair.split("=", 1)[0] != "page"
    ]
    pairs.append(f"page={page}")
    return urlunsplit((parsed.scheme, parsed.netloc, parsed.path, "&".join(pairs), parsed.fragment))
