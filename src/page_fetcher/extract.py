"""Regex helpers for pulling scalar and array fields out of raw JSON text.

These work on the text as-is without decoding it. They are meant for quick
lookups such as ``total_pages`` on a paginated response, not as a JSON parser.
"""

from __future__ import annotations

import re
from typing import Callable

PatternFactory = Callable[[str], re.Pattern[str]]


def int_value_pattern(key: str) -> re.Pattern[str]:
    return re.compile(rf'"{re.escape(key)}":(\d+)')


def string_value_pattern(key: str) -> re.Pattern[str]:
    return re.compile(rf'"{re.escape(key)}":"([^"]+)"')


def array_pattern(key: str) -> re.Pattern[str]:
    # Captures the rest of the line after the key.
    return re.compile(rf'(?:"{re.escape(key)}":)(.*)')


def extract_field(pattern_factory: PatternFactory, key: str, json_text: str) -> str | None:
    """Return the first captured value for key, or None when absent."""
    match = pattern_factory(key).search(json_text)
    if match is None:
        return None
    return match.group(1)


def extract_last_int(key: str, json_text: str) -> str | None:
    """Return the last integer value for key, or None when absent."""
    value: str | None = None
    for match in int_value_pattern(key).finditer(json_text):
        value = match.group(1)
    return value


def int_field(key: str, json_text: str) -> str | None:
    return extract_field(int_value_pattern, key, json_text)


def string_field(key: str, json_text: str) -> str | None:
    return extract_field(string_value_pattern, key, json_text)


def array_field(key: str, json_text: str) -> str | None:
    return extract_field(array_pattern, key, json_text)


EXTRACTORS: dict[str, Callable[[str, str], str | None]] = {
    "int": int_field,
    "string": string_field,
    "array": array_field,
}
