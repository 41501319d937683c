"""Fetcher interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseFetcher(ABC):
    """Abstract paginated page fetcher."""

    @abstractmethod
    def fetch_page(self, base_url: str, page: int) -> str:
        """Fetch one page and return the raw response body."""
