"""Command-line interface for Page Fetcher."""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import Any

from .config import build_fetch_config, load_yaml_config
from .errors import FetchError
from .extract import EXTRACTORS
from .fetchers import BaseFetcher, RequestsFetcher
from .models import FetchConfig


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    _handle_fetch(args)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="分页 JSON 接口抓取器")
    parser.add_argument("--config", type=Path, default=None, help="YAML 配置文件路径。")
    parser.add_argument("--base-url", dest="base_url", default=None, help="接口基础 URL。")
    parser.add_argument("--page", type=int, default=None, help="页码（从 1 开始）。")
    parser.add_argument(
        "--timeout-sec",
        dest="timeout_sec",
        type=float,
        default=None,
        help="请求超时秒数，默认不设超时。",
    )
    parser.add_argument(
        "--query-style",
        dest="query_style",
        default=None,
        choices=["legacy", "normalized"],
        help="分页参数拼接方式：legacy 为 ?&page=N，normalized 为标准查询串。",
    )
    parser.add_argument("--echo", dest="echo", action="store_true", help="输出响应正文。")
    parser.add_argument("--no-echo", dest="echo", action="store_false", help="不输出响应正文。")
    parser.set_defaults(echo=None)
    parser.add_argument(
        "--int-field",
        dest="int_fields",
        action="append",
        default=None,
        metavar="KEY",
        help="提取整数字段（可重复）。",
    )
    parser.add_argument(
        "--string-field",
        dest="string_fields",
        action="append",
        default=None,
        metavar="KEY",
        help="提取字符串字段（可重复）。",
    )
    parser.add_argument(
        "--array-field",
        dest="array_fields",
        action="append",
        default=None,
        metavar="KEY",
        help="提取数组字段原文（可重复）。",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志。")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _handle_fetch(args: argparse.Namespace, fetcher: BaseFetcher | None = None) -> str | None:
    try:
        yaml_data = load_yaml_config(args.config)
        config = build_fetch_config(_merge_fetch_settings(args, yaml_data))
    except (FileNotFoundError, ValueError) as exc:
        raise SystemExit(f"配置无效: {exc}") from exc

    if fetcher is None:
        with RequestsFetcher(
            timeout_sec=config.timeout_sec, query_style=config.query_style
        ) as owned_fetcher:
            body = _fetch_or_report(owned_fetcher, config)
    else:
        body = _fetch_or_report(fetcher, config)
    if body is None:
        return None

    if config.echo:
        print(body)
    _print_fields(config, body)
    return body


def _fetch_or_report(fetcher: BaseFetcher, config: FetchConfig) -> str | None:
    try:
        return fetcher.fetch_page(config.base_url, config.page)
    except FetchError:
        # Reported and swallowed: the process still exits normally.
        traceback.print_exc(file=sys.stderr)
        return None


def _merge_fetch_settings(args: argparse.Namespace, yaml_data: dict[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for key in ["base_url", "page", "timeout_sec", "query_style", "echo"]:
        cli_value = getattr(args, key)
        if cli_value is not None:
            merged[key] = cli_value
        elif key in yaml_data:
            merged[key] = yaml_data[key]

    cli_fields = [
        {"kind": kind, "key": key}
        for kind, values in (
            ("int", args.int_fields),
            ("string", args.string_fields),
            ("array", args.array_fields),
        )
        for key in values or []
    ]
    if cli_fields:
        merged["fields"] = cli_fields
    elif "fields" in yaml_data:
        merged["fields"] = yaml_data["fields"]
    return merged


def _print_fields(config: FetchConfig, body: str) -> None:
    for item in config.fields:
        value = EXTRACTORS[item.kind](item.key, body)
        print(f"{item.key}={value if value is not None else ''}")
