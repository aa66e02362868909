# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""The transport seam the prober talks to, and the factory for the real one."""

from typing import Protocol

from ..config import HttpSettings, load_http_settings
from .models import HttpRequest, HttpResponse


class HttpClient(Protocol):
    """
    Issues one readiness GET.

    Implementations never raise for transport failures: a refused connection or
    an expired ``request.timeout`` comes back as ``HttpResponse(ok=False)`` with
    ``meta["error_category"]`` set, so the polling loop can keep going.
    """

    def request(self, request: HttpRequest) -> HttpResponse: ...

    def close(self) -> None:  # pragma: no cover - stubs hold no connections
        ...


def create_default_http_client(settings: HttpSettings | None = None) -> HttpClient:
    """Build an HttpxClient; settings come from READYPROBE_HTTP_* when not given."""
    from .httpx_client import HttpxClient

    return HttpxClient(settings or load_http_settings())
