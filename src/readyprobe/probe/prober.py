# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Readiness polling for freshly started HTTP services.

A wait is a sequence of poll rounds. Each round probes the candidates in their
declared order and stops at the first 2xx answer, so an earlier candidate always
wins over a later one that would also have answered. Failed rounds are spaced by
``poll_interval`` measured from the start of the round, not from its end.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Sequence

from ..config import DEFAULT_POLL_INTERVAL, ProbeConfig, Signature
from ..errors import ErrorCategory, categorize_exception
from ..http.client import HttpClient, create_default_http_client
from ..http.models import HttpRequest, HttpResponse
from ..models.probe import ProbeAttempt, ProbeOutcome, ReadyResult
from .session import ProbeSession

logger = logging.getLogger(__name__)

SNIPPET_BYTES = 200


def signature_matches(body: str, signature: Signature | None) -> bool:
    """Case-insensitive substring match, or ``search`` for a compiled pattern."""
    if signature is None:
        return False
    if isinstance(signature, re.Pattern):
        return signature.search(body or "") is not None
    return signature.casefold() in (body or "").casefold()


def probe_once(
    client: HttpClient,
    url: str,
    *,
    timeout: float,
    signature: Signature | None = None,
    round_index: int = 0,
    clock: Callable[[], float] = time.monotonic,
    snippet_bytes: int = SNIPPET_BYTES,
) -> ProbeAttempt:
    """
    Issue one GET against ``url`` and classify the answer.

    Without a signature only the snippet is read off the body; with one the
    client's full body cap applies. ``timeout`` bounds the whole request either way.
    """
    started = clock()
    read_limit = None if signature is not None else max(0, snippet_bytes)
    try:
        response = client.request(HttpRequest(url=url, timeout=timeout, max_body_bytes=read_limit))
    except Exception as exc:  # noqa: BLE001
        response = HttpResponse(
            ok=False,
            url=url,
            error_message=str(exc) or type(exc).__name__,
            error_type=type(exc).__name__,
            meta={"error_category": categorize_exception(exc).value},
        )
    elapsed = clock() - started

    if not response.ok:
        return ProbeAttempt(
            url=url,
            round_index=round_index,
            outcome=ProbeOutcome.UNREACHABLE,
            error_message=response.error_message,
            error_category=response.meta.get("error_category") or ErrorCategory.UNKNOWN_ERROR.value,
            elapsed=elapsed,
        )

    snippet = response.body_snippet(snippet_bytes)
    if not response.is_success:
        return ProbeAttempt(
            url=url,
            round_index=round_index,
            outcome=ProbeOutcome.UNREACHABLE,
            status_code=response.status_code,
            error_category=ErrorCategory.HTTP_STATUS.value,
            elapsed=elapsed,
            body_snippet=snippet,
        )

    verified = signature_matches(response.text, signature)
    if signature is not None and not verified:
        logger.info("%s is up but the response does not contain the expected signature", url)
    return ProbeAttempt(
        url=url,
        round_index=round_index,
        outcome=ProbeOutcome.REACHABLE_VERIFIED if verified else ProbeOutcome.REACHABLE_UNVERIFIED,
        status_code=response.status_code,
        elapsed=elapsed,
        body_snippet=snippet,
    )


def wait_until_ready(
    config: ProbeConfig,
    *,
    client: HttpClient | None = None,
    clock: Callable[[], float] | None = None,
    sleep: Callable[[float], None] | None = None,
) -> ReadyResult:
    """
    Poll ``config.candidates`` until one answers 2xx or ``config.total_timeout`` elapses.

    Raises ConfigurationError (before any request) for an invalid config and
    ProbeTimeoutError when the deadline passes. A client created here is closed
    before returning; an injected client is left open for its owner.
    """
    config = config.validate()
    clock = clock or time.monotonic
    sleep = sleep or time.sleep

    owns_client = client is None
    http_client = client if client is not None else create_default_http_client()
    try:
        return _poll(config, http_client, clock, sleep)
    finally:
        if owns_client:
            http_client.close()


def _poll(
    config: ProbeConfig,
    client: HttpClient,
    clock: Callable[[], float],
    sleep: Callable[[float], None],
) -> ReadyResult:
    session = ProbeSession.start(config, clock)
    probe_timeout = float(config.probe_timeout or config.poll_interval)
    logger.debug(
        "waiting up to %.1fs for %s (interval %.2fs, probe timeout %.2fs)",
        config.total_timeout,
        ", ".join(config.candidates),
        config.poll_interval,
        probe_timeout,
    )

    while not session.expired():
        round_start = clock()
        session.rounds += 1
        for url in config.candidates:
            remaining = session.remaining()
            if remaining <= 0:
                break
            attempt = probe_once(
                client,
                url,
                timeout=min(probe_timeout, remaining),
                signature=config.expected_signature,
                round_index=session.rounds,
                clock=clock,
            )
            session.record(attempt)
            if attempt.outcome.is_reachable:
                logger.info("%s ready after %.1fs (%s)", url, session.elapsed(), attempt.outcome.value)
                return session.success(attempt)
            logger.debug("round %d: %s unreachable: %s", session.rounds, url, attempt.reason)

        delay = min(round_start + config.poll_interval, session.deadline) - clock()
        if delay > 0:
            sleep(delay)

    logger.warning("no candidate became ready within %.1fs", config.total_timeout)
    raise session.timeout_error()


def await_ready(
    candidates: Sequence[str],
    total_timeout: float,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    expected_signature: Signature | None = None,
    *,
    probe_timeout: float | None = None,
    client: HttpClient | None = None,
    clock: Callable[[], float] | None = None,
    sleep: Callable[[float], None] | None = None,
) -> ReadyResult:
    """
    Wait for the first of ``candidates`` to answer with a 2xx status.

    Returns a ReadyResult that also unpacks as ``(url, outcome)``. The outcome is
    REACHABLE_VERIFIED when ``expected_signature`` was found in the body and
    REACHABLE_UNVERIFIED otherwise; a missing signature never fails the wait.
    """
    config = ProbeConfig(
        candidates=list(candidates or []),
        total_timeout=total_timeout,
        poll_interval=poll_interval,
        probe_timeout=probe_timeout,
        expected_signature=expected_signature,
    )
    return wait_until_ready(config, client=client, clock=clock, sleep=sleep)


__all__ = ["await_ready", "probe_once", "signature_matches", "wait_until_ready"]
