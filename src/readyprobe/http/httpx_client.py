# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import time
from collections.abc import Callable

import httpx

from ..config import HttpSettings, load_http_settings
from ..errors import categorize_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse

# Reasons a body read stopped before the server finished sending.
STOP_LIMIT = "limit"
STOP_DEADLINE = "deadline"
STOP_SKIPPED = "skipped"


class HttpxClient(HttpClient):
    """
    Synchronous httpx client tuned for liveness checks.

    httpx applies ``timeout`` to each connect/read step; a server that sends its
    headers and then trickles the body would keep a request alive far longer than
    that. Here ``request.timeout`` bounds the whole exchange: once it has passed,
    the body read stops and the response is returned with what arrived so far.
    """

    def __init__(
        self,
        settings: HttpSettings | None = None,
        client: httpx.Client | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or load_http_settings()
        self._clock = clock
        self._client = client or httpx.Client(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    def _body_limit(self, request: HttpRequest) -> int:
        ceiling = max(0, self.settings.max_body_bytes)
        if request.max_body_bytes is None:
            return ceiling
        return max(0, min(request.max_body_bytes, ceiling))

    def _read_body(self, resp: httpx.Response, limit: int, deadline: float) -> tuple[bytes, str | None]:
        if limit == 0:
            return b"", STOP_SKIPPED
        body = bytearray()
        for chunk in resp.iter_bytes():
            room = limit - len(body)
            body.extend(chunk[:room])
            if len(chunk) > room:
                return bytes(body), STOP_LIMIT
            if self._clock() >= deadline:
                return bytes(body), STOP_DEADLINE
        return bytes(body), None

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = {"User-Agent": self.settings.user_agent, **(request.headers or {})}
        timeout = request.timeout if request.timeout is not None else self.settings.timeout
        deadline = self._clock() + timeout
        limit = self._body_limit(request)

        try:
            # The stream context releases the connection on every exit path.
            with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                timeout=timeout,
                follow_redirects=request.allow_redirects,
            ) as resp:
                content, stopped = self._read_body(resp, limit, deadline)
                try:
                    text = content.decode(resp.encoding or "utf-8", errors="replace")
                except LookupError:
                    text = content.decode("utf-8", errors="replace")
        except Exception as exc:  # noqa: BLE001
            return HttpResponse(
                ok=False,
                url=request.url,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
                meta={"error_category": categorize_exception(exc).value},
            )

        return HttpResponse(
            ok=True,
            status_code=resp.status_code,
            headers=dict(resp.headers),
            text=text,
            content=content,
            url=str(resp.url),
            meta={
                "body_truncated": stopped is not None,
                "body_stop_reason": stopped,
                "body_bytes_read": len(content),
                "body_bytes_limit": limit,
            },
        )

    def close(self) -> None:
        self._client.close()
