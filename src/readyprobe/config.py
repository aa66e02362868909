# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for readyprobe."""

from __future__ import annotations

import logging
import math
import os
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from .errors import ConfigurationError
from .version import __version__

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"readyprobe/{__version__}"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_PROBE_TIMEOUT = 3.0
# Share of the poll interval a single probe may use when its timeout has to be clamped.
PROBE_TIMEOUT_SHARE = 0.8

Signature = str | re.Pattern[str]


def _positive_seconds(value: object) -> bool:
    """True for a finite duration above zero; rejects None, NaN and infinities."""
    try:
        seconds = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return False
    return math.isfinite(seconds) and seconds > 0


def _float_env(name: str, default: float) -> float:
    value = _optional_float_env(name, default)
    return default if value is None else value


def _optional_float_env(name: str, default: float | None) -> float | None:
    try:
        value = os.getenv(name)
        parsed = float(value) if value is not None else default
    except ValueError:
        return default
    if parsed is not None and not math.isfinite(parsed):
        return default
    return parsed


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class HttpSettings:
    """HTTP client defaults."""

    timeout: float = DEFAULT_PROBE_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    max_body_bytes: int = 1024 * 1024

    @classmethod
    def from_env(cls) -> HttpSettings:
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("READYPROBE_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        return cls(
            timeout=_float_env("READYPROBE_HTTP_TIMEOUT", cls.timeout),
            user_agent=os.getenv("READYPROBE_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("READYPROBE_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("READYPROBE_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


@dataclass
class ProbeConfig:
    """
    Everything a single readiness wait needs.

    ``candidates`` are tried in order on every poll round; the first one answering
    with a 2xx status wins. ``probe_timeout`` bounds each individual request and
    defaults to ``DEFAULT_PROBE_TIMEOUT`` capped below ``poll_interval``.
    ``expected_signature`` is advisory: a 2xx body without it is still "ready".
    """

    candidates: list[str] = field(default_factory=list)
    total_timeout: float = 60.0
    poll_interval: float = DEFAULT_POLL_INTERVAL
    probe_timeout: float | None = None
    expected_signature: Signature | None = None

    @classmethod
    def from_env(cls, candidates: Sequence[str] | None = None) -> ProbeConfig:
        """Create a config from environment variables (evaluated at call time)."""
        return cls(
            candidates=list(candidates or []),
            total_timeout=_float_env("READYPROBE_TIMEOUT", cls.total_timeout),
            poll_interval=_float_env("READYPROBE_POLL_INTERVAL", cls.poll_interval),
            probe_timeout=_optional_float_env("READYPROBE_PROBE_TIMEOUT", None),
            expected_signature=os.getenv("READYPROBE_EXPECT") or None,
        )

    def validate(self) -> ProbeConfig:
        """
        Return a normalized copy of this config or raise ConfigurationError.

        Performs no I/O. Soft problems (an interval longer than the timeout, a probe
        timeout that would not fit inside one interval) are clamped and logged.
        """
        from .http.url import is_http_url

        candidates = [str(c).strip() for c in self.candidates or []]
        if not candidates:
            raise ConfigurationError("at least one candidate URL is required")
        invalid = [c for c in candidates if not is_http_url(c)]
        if invalid:
            raise ConfigurationError(f"not an absolute http(s) URL: {', '.join(invalid)}")

        if not _positive_seconds(self.total_timeout):
            raise ConfigurationError(f"total_timeout must be a finite number > 0 (got {self.total_timeout!r})")
        if not _positive_seconds(self.poll_interval):
            raise ConfigurationError(f"poll_interval must be a finite number > 0 (got {self.poll_interval!r})")
        if self.probe_timeout is not None and not _positive_seconds(self.probe_timeout):
            raise ConfigurationError(f"probe_timeout must be a finite number > 0 (got {self.probe_timeout!r})")

        total_timeout = float(self.total_timeout)
        poll_interval = float(self.poll_interval)
        if poll_interval > total_timeout:
            logger.warning("poll_interval %.2fs exceeds total_timeout %.2fs; clamping", poll_interval, total_timeout)
            poll_interval = total_timeout

        ceiling = poll_interval * PROBE_TIMEOUT_SHARE
        probe_timeout = None if self.probe_timeout is None else float(self.probe_timeout)
        if probe_timeout is None:
            probe_timeout = min(DEFAULT_PROBE_TIMEOUT, ceiling)
        elif probe_timeout >= poll_interval:
            logger.warning("probe_timeout %.2fs does not fit in poll_interval %.2fs; clamping to %.2fs", probe_timeout, poll_interval, ceiling)
            probe_timeout = ceiling

        signature = self.expected_signature
        if isinstance(signature, str) and not signature.strip():
            signature = None

        return ProbeConfig(
            candidates=candidates,
            total_timeout=total_timeout,
            poll_interval=poll_interval,
            probe_timeout=probe_timeout,
            expected_signature=signature,
        )
