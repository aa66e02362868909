# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Deterministic HttpClient implementations for tests and dry runs."""

from __future__ import annotations

from collections.abc import Callable

from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """Deterministic, programmable HttpClient for tests."""

    def __init__(self, responses: dict[str, HttpResponse] | None = None):
        self._responses = responses or {}
        self.requests: list[HttpRequest] = []
        self.closed = False

    def add(self, url: str, response: HttpResponse) -> None:
        self._responses[url] = response

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if request.url in self._responses:
            return self._responses[request.url]
        return HttpResponse(
            ok=False,
            status_code=None,
            url=request.url,
            error_message="Connection refused",
            error_type="ConnectError",
            meta={"error_category": "CONNECTION_ERROR"},
        )

    def close(self) -> None:
        self.closed = True


class ScriptedHttpClient(StubHttpClient):
    """
    HttpClient whose answers are computed per request.

    ``handler`` receives the request and returns a response, or ``None`` to fall
    back to the stubbed/refused behaviour of StubHttpClient. Useful for services
    that "come up" partway through a test.
    """

    def __init__(self, handler: Callable[[HttpRequest], HttpResponse | None]):
        super().__init__()
        self._handler = handler

    def request(self, request: HttpRequest) -> HttpResponse:
        response = self._handler(request)
        if response is None:
            return super().request(request)
        self.requests.append(request)
        return response
