# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import ScriptedHttpClient, StubHttpClient
from .client import HttpClient, create_default_http_client
from .httpx_client import HttpxClient
from .models import Headers, HttpRequest, HttpResponse
from .url import build_port_candidates, host_advisories, is_http_url, parse_port_mapping

__all__ = [
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "ScriptedHttpClient",
    "StubHttpClient",
    "build_port_candidates",
    "create_default_http_client",
    "host_advisories",
    "is_http_url",
    "parse_port_mapping",
]
