# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Readiness probing exports."""

from .prober import await_ready, probe_once, signature_matches, wait_until_ready
from .session import ProbeSession

__all__ = ["ProbeSession", "await_ready", "probe_once", "signature_matches", "wait_until_ready"]
