# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for readyprobe."""

from ..http.models import Headers, HttpRequest, HttpResponse
from .probe import ProbeAttempt, ProbeOutcome, ReadyResult

__all__ = [
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "ProbeAttempt",
    "ProbeOutcome",
    "ReadyResult",
]
