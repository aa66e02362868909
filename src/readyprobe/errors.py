# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from collections.abc import Mapping, Sequence
from enum import Enum

import httpx

# httpx wraps resolver failures in ConnectError; these fragments identify them.
_DNS_HINTS = (
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo failed",
)


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    HTTP_STATUS = "HTTP_STATUS"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class ReadyProbeError(Exception):
    """Base class for readyprobe errors."""


class ConfigurationError(ReadyProbeError, ValueError):
    """Invalid probe configuration. Raised before any network I/O."""


class ProbeTimeoutError(ReadyProbeError, TimeoutError):
    """
    No candidate became ready before the deadline.

    Carries everything an operator needs to diagnose the failure: the candidates
    that were tried (in priority order), the elapsed wall time, the number of
    poll rounds and the last failure reason recorded for each candidate.
    """

    def __init__(
        self,
        candidates: Sequence[str],
        elapsed: float,
        rounds: int,
        last_errors: Mapping[str, str] | None = None,
    ):
        self.candidates = list(candidates)
        self.elapsed = elapsed
        self.rounds = rounds
        self.last_errors = dict(last_errors or {})
        super().__init__(self.render())

    def render(self) -> str:
        lines = [
            f"Service did not become ready after {self.elapsed:.1f}s "
            f"({self.rounds} round{'s' if self.rounds != 1 else ''}). Endpoints tried:"
        ]
        for url in self.candidates:
            reason = self.last_errors.get(url) or "not probed"
            lines.append(f"  - {url}: {reason}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "ready": False,
            "candidates": list(self.candidates),
            "elapsed": round(self.elapsed, 3),
            "rounds": self.rounds,
            "last_errors": dict(self.last_errors),
        }


def categorize_exception(exc: Exception) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, httpx.ConnectError):
        cause = exc.__cause__ or exc.__context__
        message = str(exc).lower()
        if isinstance(cause, (socket.gaierror, socket.herror)) or any(hint in message for hint in _DNS_HINTS):
            return ErrorCategory.DNS_ERROR
        if isinstance(cause, ssl_module.SSLError) or "certificate" in message:
            return ErrorCategory.SSL_ERROR
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | str | None) -> str:
    """User-facing reason string."""
    if isinstance(category, str) and not isinstance(category, ErrorCategory):
        try:
            category = ErrorCategory(category)
        except ValueError:
            category = ErrorCategory.UNKNOWN_ERROR
    mapping = {
        ErrorCategory.TIMEOUT: "request timed out",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "connection failed",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.HTTP_STATUS: "non-success HTTP status",
        ErrorCategory.UNKNOWN_ERROR: "network error",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "network error")


__all__ = [
    "ConfigurationError",
    "ErrorCategory",
    "ProbeTimeoutError",
    "ReadyProbeError",
    "categorize_exception",
    "error_category_to_reason",
]
