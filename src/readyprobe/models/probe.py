# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe outcome models."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..errors import error_category_to_reason


class ProbeOutcome(str, Enum):
    UNREACHABLE = "UNREACHABLE"
    REACHABLE_UNVERIFIED = "REACHABLE_UNVERIFIED"
    REACHABLE_VERIFIED = "REACHABLE_VERIFIED"

    @property
    def is_reachable(self) -> bool:
        return self is not ProbeOutcome.UNREACHABLE


@dataclass
class ProbeAttempt:
    """A single probe of one candidate during one poll round."""

    url: str
    round_index: int
    outcome: ProbeOutcome
    status_code: int | None = None
    error_message: str | None = None
    error_category: str | None = None
    elapsed: float = 0.0
    body_snippet: str = ""

    @property
    def reason(self) -> str:
        """Short human-readable explanation of an unreachable attempt."""
        if self.outcome.is_reachable:
            return ""
        if self.status_code is not None:
            return f"HTTP {self.status_code}"
        category = error_category_to_reason(self.error_category)
        if category and self.error_message:
            return f"{category}: {self.error_message}"
        return self.error_message or category or "unreachable"

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "round": self.round_index,
            "outcome": self.outcome.value,
            "status_code": self.status_code,
            "error_message": self.error_message,
            "error_category": self.error_category,
            "elapsed": round(self.elapsed, 3),
        }


@dataclass
class ReadyResult:
    """Successful readiness wait: the winning candidate and how it answered."""

    url: str
    outcome: ProbeOutcome
    status_code: int | None = None
    elapsed: float = 0.0
    rounds: int = 1
    attempts: list[ProbeAttempt] = field(default_factory=list)

    @property
    def verified(self) -> bool:
        return self.outcome is ProbeOutcome.REACHABLE_VERIFIED

    def __iter__(self) -> Iterator[Any]:
        # Allows ``url, outcome = await_ready(...)``.
        yield self.url
        yield self.outcome

    def to_dict(self) -> dict[str, Any]:
        return {
            "ready": True,
            "url": self.url,
            "outcome": self.outcome.value,
            "status_code": self.status_code,
            "elapsed": round(self.elapsed, 3),
            "rounds": self.rounds,
            "attempts": [attempt.to_dict() for attempt in self.attempts],
        }
