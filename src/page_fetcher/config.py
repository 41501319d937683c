"""Configuration helpers for CLI + YAML input."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any

import yaml

from .models import (
    DEFAULT_BASE_URL,
    DEFAULT_PAGE,
    FIELD_KINDS,
    QUERY_STYLES,
    FetchConfig,
    FieldRequest,
    is_http_url,
)


def load_yaml_config(path: Path | None) -> dict[str, Any]:
    """Load YAML config or return empty dict when path is absent."""
    if path is None:
        return {}
    if not path.exists():
        raise FileNotFoundError(f"配置文件不存在: {path}")
    with path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError("YAML 配置根节点必须是对象（mapping）。")
    return data


def build_fetch_config(raw: dict[str, Any]) -> FetchConfig:
    """Construct FetchConfig with normalized values."""
    config = FetchConfig(
        base_url=str(raw.get("base_url", DEFAULT_BASE_URL)),
        page=_as_page(raw.get("page", DEFAULT_PAGE)),
        timeout_sec=_as_timeout(raw.get("timeout_sec")),
        query_style=str(raw.get("query_style", "legacy")).lower(),
        echo=_as_bool(raw.get("echo", True), "echo"),
        fields=[_build_field(item) for item in _as_list(raw.get("fields"), "fields")],
    )
    validate_fetch_config(config)
    return config


def _as_page(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"page 必须是整数: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("+-").isdigit():
        return int(value)
    raise ValueError(f"page 必须是整数: {value!r}")


def _as_timeout(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"timeout_sec 必须是数字: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"timeout_sec 必须是数字: {value!r}") from exc


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "on", "1"}:
            return True
        if lowered in {"false", "no", "off", "0"}:
            return False
    raise ValueError(f"{name} 必须是布尔值: {value!r}")


def _as_list(value: Any, name: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{name} 必须是列表: {value!r}")
    return value


def _build_field(item: Any) -> FieldRequest:
    if isinstance(item, FieldRequest):
        return item
    if isinstance(item, dict):
        return FieldRequest(kind=str(item.get("kind", "")).lower(), key=str(item.get("key", "")))
    raise ValueError(f"fields 项必须是包含 kind 和 key 的对象: {item!r}")


def validate_fetch_config(config: FetchConfig) -> None:
    """Validate config values and raise ValueError on invalid input."""
    if not is_http_url(config.base_url):
        raise ValueError("base_url 必须是绝对 http(s) URL。")
    if config.page < 1:
        raise ValueError("page 必须 >= 1")
    if config.timeout_sec is not None and (
        not math.isfinite(config.timeout_sec) or config.timeout_sec <= 0
    ):
        raise ValueError("timeout_sec 必须是 > 0 的有限数")
    if config.query_style not in QUERY_STYLES:
        raise ValueError(f"query_style 必须是以下之一: {', '.join(QUERY_STYLES)}")
    for item in config.fields:
        if item.kind not in FIELD_KINDS:
            raise ValueError(f"字段类型必须是以下之一: {', '.join(FIELD_KINDS)}")
        if not item.key.strip():
            raise ValueError("字段名不能为空。")
