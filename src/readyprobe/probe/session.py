# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-call probe session state."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ..config import ProbeConfig
from ..errors import ProbeTimeoutError
from ..models.probe import ProbeAttempt, ReadyResult


@dataclass
class ProbeSession:
    """
    Transient state for one readiness wait.

    Owned by a single ``await_ready`` call and discarded when it returns. The
    clock is injected so the deadline arithmetic can be driven by tests.
    """

    config: ProbeConfig
    clock: Callable[[], float]
    started_at: float
    deadline: float
    rounds: int = 0
    attempts: list[ProbeAttempt] = field(default_factory=list)
    last_errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def start(cls, config: ProbeConfig, clock: Callable[[], float]) -> ProbeSession:
        now = clock()
        return cls(config=config, clock=clock, started_at=now, deadline=now + config.total_timeout)

    def elapsed(self) -> float:
        return self.clock() - self.started_at

    def remaining(self) -> float:
        return self.deadline - self.clock()

    def expired(self) -> bool:
        return self.clock() >= self.deadline

    def record(self, attempt: ProbeAttempt) -> None:
        self.attempts.append(attempt)
        if not attempt.outcome.is_reachable:
            self.last_errors[attempt.url] = attempt.reason

    def success(self, attempt: ProbeAttempt) -> ReadyResult:
        return ReadyResult(
            url=attempt.url,
            outcome=attempt.outcome,
            status_code=attempt.status_code,
            elapsed=self.elapsed(),
            rounds=self.rounds,
            attempts=list(self.attempts),
        )

    def timeout_error(self) -> ProbeTimeoutError:
        return ProbeTimeoutError(
            candidates=self.config.candidates,
            elapsed=self.elapsed(),
            rounds=self.rounds,
            last_errors=self.last_errors,
        )
