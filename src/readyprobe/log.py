# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Console logging for the readyprobe CLI."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "READYPROBE_LOG_LEVEL"
# Per-request INFO lines from these would repeat on every poll round.
NOISY_LOGGERS = ("httpx", "httpcore")


def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv(LOG_LEVEL_ENV) or "WARNING").strip().upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(level: str | None = None) -> int:
    """
    Route readyprobe's log records to stderr and return the level applied.

    ``level`` wins over READYPROBE_LOG_LEVEL; unknown names fall back to WARNING.
    Transport libraries stay at WARNING unless DEBUG was asked for.
    """
    effective = _resolve_level(level)
    logging.basicConfig(
        level=effective,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("readyprobe").setLevel(effective)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if effective <= logging.DEBUG else logging.WARNING)
    return effective


__all__ = ["setup_logging"]
