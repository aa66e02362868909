# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from readyprobe.models.probe import ProbeAttempt, ProbeOutcome, ReadyResult


def test_probe_attempt_reason():
    assert ProbeAttempt(url="http://a/", round_index=1, outcome=ProbeOutcome.UNREACHABLE, status_code=502).reason == "HTTP 502"
    timed_out = ProbeAttempt(
        url="http://a/",
        round_index=1,
        outcome=ProbeOutcome.UNREACHABLE,
        error_message="timed out",
        error_category="TIMEOUT",
    )
    assert timed_out.reason == "request timed out: timed out"
    assert ProbeAttempt(url="http://a/", round_index=1, outcome=ProbeOutcome.UNREACHABLE).reason == "unreachable"
    assert ProbeAttempt(url="http://a/", round_index=1, outcome=ProbeOutcome.REACHABLE_VERIFIED, status_code=200).reason == ""


def test_outcome_reachability():
    assert not ProbeOutcome.UNREACHABLE.is_reachable
    assert ProbeOutcome.REACHABLE_UNVERIFIED.is_reachable
    assert ProbeOutcome.REACHABLE_VERIFIED.is_reachable


def test_ready_result_to_dict():
    attempt = ProbeAttempt(url="http://a/", round_index=2, outcome=ProbeOutcome.REACHABLE_VERIFIED, status_code=200, elapsed=0.0123)
    result = ReadyResult(url="http://a/", outcome=ProbeOutcome.REACHABLE_VERIFIED, status_code=200, elapsed=2.25, rounds=2, attempts=[attempt])

    data = result.to_dict()

    assert data["ready"] is True
    assert data["outcome"] == "REACHABLE_VERIFIED"
    assert data["rounds"] == 2
    assert data["attempts"][0]["round"] == 2
    assert data["attempts"][0]["elapsed"] == 0.012
    assert result.verified is True
