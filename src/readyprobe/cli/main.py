# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""readyprobe CLI."""

from __future__ import annotations

import argparse
import json
import math
import os
import sys
from typing import Any

from ..config import HttpSettings, ProbeConfig, load_http_settings
from ..errors import ConfigurationError, ProbeTimeoutError
from ..http import (
    build_port_candidates,
    create_default_http_client,
    host_advisories,
    is_http_url,
    parse_port_mapping,
)
from ..log import setup_logging
from ..models.probe import ProbeAttempt, ReadyResult
from ..runtime import ReadinessProber

EXIT_READY = 0
EXIT_NOT_READY = 1
EXIT_CONFIG_ERROR = 2

DEFAULT_SNIPPET_BYTES = 200
DEFAULT_CHECK_URL = "http://127.0.0.1:11434"
DEFAULT_CHECK_PATH = "/api/tags"


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--expect", metavar="TEXT", help="Text expected in a ready response body (case-insensitive)")
    parser.add_argument("--json", action="store_true", help="Output JSON instead of human-friendly summary")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for self-signed local services)",
    )
    parser.add_argument("--log-level", help="Logging level (default: READYPROBE_LOG_LEVEL or WARNING)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Wait for a freshly started HTTP service to become ready")
    subparsers = parser.add_subparsers(dest="command", required=True)

    wait = subparsers.add_parser("wait", help="Poll candidate URLs until one answers 2xx")
    wait.add_argument("urls", nargs="*", help="Candidate URLs, in priority order")
    wait.add_argument("--port", type=int, action="append", default=[], help="Candidate port on --host (repeatable)")
    wait.add_argument("--publish", metavar="HOST:CONTAINER", help="Port mapping whose ports become candidates, host port first")
    wait.add_argument("--host", default="127.0.0.1", help="Host used with --port/--publish (default: 127.0.0.1)")
    wait.add_argument("--path", default="/", help="Path used with --port/--publish (default: /)")
    wait.add_argument("--timeout", type=float, help="Total time to wait in seconds (default: READYPROBE_TIMEOUT or 60)")
    wait.add_argument("--interval", type=float, help="Seconds between poll rounds (default: READYPROBE_POLL_INTERVAL or 1)")
    wait.add_argument("--probe-timeout", type=float, help="Per-request timeout in seconds")
    _add_common_arguments(wait)

    check = subparsers.add_parser("check", help="Probe a URL once and show the start of the response")
    check.add_argument("url", nargs="?", help="URL to probe (default: OLLAMA_URL or http://127.0.0.1:11434, with --path /api/tags)")
    check.add_argument("--path", help="Path joined onto the URL (default: /api/tags when no URL is given)")
    check.add_argument("--bytes", type=int, default=DEFAULT_SNIPPET_BYTES, help="Body bytes to show (default: 200)")
    check.add_argument("--timeout", type=float, help="Request timeout in seconds")
    _add_common_arguments(check)
    return parser


def _print_json(data: dict[str, Any] | Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(payload, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _collect_candidates(args: argparse.Namespace) -> list[str]:
    candidates = list(args.urls)
    ports = list(args.port or [])
    if args.publish:
        try:
            ports.extend(p for p in parse_port_mapping(args.publish) if p not in ports)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
    for url in build_port_candidates(args.host, ports, args.path):
        if url not in candidates:
            candidates.append(url)
    return candidates


def _build_probe_config(args: argparse.Namespace) -> ProbeConfig:
    config = ProbeConfig.from_env(_collect_candidates(args))
    if args.timeout is not None:
        config.total_timeout = args.timeout
    if args.interval is not None:
        config.poll_interval = args.interval
    if args.probe_timeout is not None:
        config.probe_timeout = args.probe_timeout
    if args.expect:
        config.expected_signature = args.expect
    return config


def _pretty_print_ready(result: ReadyResult) -> None:
    print(f"[readyprobe] Ready: {result.url}")
    print(f"Outcome: {result.outcome.value}")
    if result.status_code is not None:
        print(f"Status: HTTP {result.status_code}")
    print(f"Waited: {result.elapsed:.1f}s over {result.rounds} round(s)")


def _pretty_print_check(attempt: ProbeAttempt, *, max_bytes: int) -> None:
    print(f"[readyprobe] {attempt.url}: {attempt.outcome.value}")
    if attempt.status_code is not None:
        print(f"Status: HTTP {attempt.status_code}")
    elif attempt.reason:
        print(f"Error: {attempt.reason}")
    if attempt.body_snippet:
        print(f"First {max_bytes} bytes:")
        print(attempt.body_snippet)


def _run_wait(args: argparse.Namespace, settings: HttpSettings) -> int:
    try:
        config = _build_probe_config(args).validate()
    except ConfigurationError as exc:
        print(f"readyprobe: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    with ReadinessProber(create_default_http_client(settings), http_settings=settings) as prober:
        try:
            result = prober.await_ready(config)
        except ProbeTimeoutError as exc:
            if args.json:
                _print_json(exc)
            else:
                print(exc.render())
                print("The service may still be starting; check its logs.")
            return EXIT_NOT_READY

    if args.json:
        _print_json(result)
    else:
        _pretty_print_ready(result)
    return EXIT_READY


def _check_target(args: argparse.Namespace) -> str:
    """Resolve the URL for `check`; without one, the local model server's tag list is used."""
    base = args.url or os.getenv("OLLAMA_URL") or DEFAULT_CHECK_URL
    path = args.path if args.path is not None else (None if args.url else DEFAULT_CHECK_PATH)
    if not path:
        return base
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


def _run_check(args: argparse.Namespace, settings: HttpSettings) -> int:
    url = _check_target(args)
    if not is_http_url(url):
        print(f"readyprobe: not an absolute http(s) URL: {url}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    if args.timeout is not None and not (math.isfinite(args.timeout) and args.timeout > 0):
        print(f"readyprobe: --timeout must be a finite number > 0 (got {args.timeout})", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    advisories = host_advisories(url)
    with ReadinessProber(create_default_http_client(settings), http_settings=settings) as prober:
        attempt = prober.check(
            url,
            expected_signature=args.expect or None,
            timeout=args.timeout,
            snippet_bytes=max(args.bytes, 0),
        )

    if args.json:
        payload = attempt.to_dict()
        payload["body_snippet"] = attempt.body_snippet
        payload["advisories"] = advisories
        _print_json(payload)
    else:
        for note in advisories:
            print(f"NOTE: {note}")
        _pretty_print_check(attempt, max_bytes=args.bytes)
    return EXIT_READY if attempt.outcome.is_reachable else EXIT_NOT_READY


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings: HttpSettings = load_http_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False

    if args.command == "check":
        return _run_check(args, settings)
    return _run_wait(args, settings)


if __name__ == "__main__":
    raise SystemExit(main())
