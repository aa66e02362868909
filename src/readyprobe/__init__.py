# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
readyprobe package entrypoint.

Waits for a freshly started HTTP service to answer on one of several candidate
URLs. HTTP behavior is abstracted behind an injectable client interface, and
outcomes are modeled with typed dataclasses.
"""

from .config import HttpSettings, ProbeConfig, load_http_settings
from .errors import ConfigurationError, ProbeTimeoutError, ReadyProbeError
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    create_default_http_client,
)
from .log import setup_logging
from .models import ProbeAttempt, ProbeOutcome, ReadyResult
from .probe import await_ready, probe_once, wait_until_ready
from .runtime import ReadinessProber
from .version import __version__

__all__ = [
    "ConfigurationError",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "ProbeAttempt",
    "ProbeConfig",
    "ProbeOutcome",
    "ProbeTimeoutError",
    "ReadinessProber",
    "ReadyProbeError",
    "ReadyResult",
    "await_ready",
    "create_default_http_client",
    "load_http_settings",
    "probe_once",
    "setup_logging",
    "wait_until_ready",
    "__version__",
]
