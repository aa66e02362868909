# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used across readyprobe."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """
    Normalized request representation consumed by HttpClient implementations.

    ``timeout`` bounds the whole exchange. ``max_body_bytes`` caps how much of the
    body is read: ``None`` uses the client's own cap, ``0`` skips the body.
    """

    url: str
    method: str = "GET"
    headers: Headers | None = None
    timeout: float | None = None
    allow_redirects: bool = True
    max_body_bytes: int | None = None


@dataclass
class HttpResponse:
    """
    Normalized HTTP response.

    ``ok`` reports transport success only: a 503 that arrived intact is ``ok=True``
    with ``status_code=503``. Use ``is_success`` for the 2xx check.
    """

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    text: str = ""
    content: bytes = b""
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.ok and self.status_code is not None and 200 <= self.status_code < 300

    def body_snippet(self, max_bytes: int = 200) -> str:
        """Return the first ``max_bytes`` of the body as text."""
        if max_bytes <= 0:
            return ""
        raw = self.content or self.text.encode("utf-8")
        return raw[:max_bytes].decode("utf-8", errors="replace")
