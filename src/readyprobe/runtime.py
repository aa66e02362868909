# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level facade that shares one HTTP client across readiness checks."""

from __future__ import annotations

import time
from collections.abc import Callable
from contextlib import suppress

from .config import HttpSettings, ProbeConfig, Signature, load_http_settings
from .http.client import HttpClient, create_default_http_client
from .models.probe import ProbeAttempt, ReadyResult
from .probe.prober import SNIPPET_BYTES, probe_once, wait_until_ready


class ReadinessProber:
    """
    Convenience wrapper that owns an HTTP client for repeated waits and checks.

    The client is closed on ``close()`` or when used as a context manager.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        http_settings: HttpSettings | None = None,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], None] | None = None,
    ):
        self.http_settings = http_settings or load_http_settings()
        self.http_client = http_client or create_default_http_client(self.http_settings)
        self._clock = clock
        self._sleep = sleep

    def await_ready(self, config: ProbeConfig) -> ReadyResult:
        return wait_until_ready(config, client=self.http_client, clock=self._clock, sleep=self._sleep)

    def check(
        self,
        url: str,
        *,
        expected_signature: Signature | None = None,
        timeout: float | None = None,
        snippet_bytes: int = SNIPPET_BYTES,
    ) -> ProbeAttempt:
        """Probe ``url`` exactly once; the attempt carries the start of the body."""
        return probe_once(
            self.http_client,
            url,
            timeout=timeout if timeout is not None else self.http_settings.timeout,
            signature=expected_signature,
            clock=self._clock or time.monotonic,
            snippet_bytes=snippet_bytes,
        )

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> ReadinessProber:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
