"""Fetcher implementations."""

from .base import BaseFetcher
from .requests_fetcher import RequestsFetcher, fetch_page

__all__ = ["BaseFetcher", "RequestsFetcher", "fetch_page"]
