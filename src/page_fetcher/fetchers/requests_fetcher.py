"""Requests-based paginated page fetcher."""

from __future__ import annotations

import logging
import math
import time

import requests

from ..errors import FetchError
from ..models import PageRequest
from ..query import build_page_url
from .base import BaseFetcher

logger = logging.getLogger(__name__)


class RequestsFetcher(BaseFetcher):
    """Blocking HTTP fetcher using requests.Session.

    A session passed in by the caller stays owned by the caller; one built
    here is closed by :meth:`close`.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout_sec: float | None = None,
        query_style: str = "legacy",
    ) -> None:
        if timeout_sec is not None and (not math.isfinite(timeout_sec) or timeout_sec <= 0):
            raise ValueError(f"timeout_sec 必须是 > 0 的有限数: {timeout_sec!r}")
        self._session = session
        self._owns_session = session is None
        self.timeout_sec = timeout_sec
        self.query_style = query_style

    def __enter__(self) -> RequestsFetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def close(self) -> None:
        if self._owns_session and self._session is not None:
            self._session.close()
            self._session = None

    def fetch_page(self, base_url: str, page: int) -> str:
        request = PageRequest(base_url=base_url, page=page)
        url = build_page_url(request.base_url, request.page, self.query_style)
        logger.debug("GET %s", url)
        started = time.perf_counter()
        try:
            with self._get_session().get(url, timeout=self.timeout_sec, stream=True) as response:
                response.raise_for_status()
                # Server-declared charset is ignored; body is always UTF-8.
                text = response.content.decode("utf-8")
        except requests.RequestException as exc:
            logger.warning("Fetch failed for %s: %s", url, exc)
            raise FetchError(f"页面抓取失败: {url}: {exc}", url=url, cause=exc) from exc
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Fetch failed for %s: %s", url, exc)
            raise FetchError(f"页面读取失败: {url}: {exc}", url=url, cause=exc) from exc

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.debug("Fetched %s: %d chars in %d ms", url, len(text), elapsed_ms)
        return text


def fetch_page(
    base_url: str,
    page: int,
    *,
    timeout_sec: float | None = None,
    query_style: str = "legacy",
) -> str:
    """Fetch one page with a throwaway session."""
    with RequestsFetcher(timeout_sec=timeout_sec, query_style=query_style) as fetcher:
        return fetcher.fetch_page(base_url, page)
