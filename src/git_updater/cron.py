"""Checks against the host's scheduled-task registry.

The registry is a mapping of run timestamp (unix seconds) to the hooks due
at that time, ``{1700000000: {"gu_get_remote_plugin": {...}}}``. Only the
first hook of each slot is inspected.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any

import structlog

from git_updater.errors import ErrorCode
from git_updater.protocols import MessageCollectorProtocol

log = structlog.get_logger()

CRON_OVERDUE_MESSAGE = (
    "There may be a problem with WP-Cron. A Git Updater WP-Cron event is overdue."
)


def is_duplicate_event(
    cron: Mapping[int, Mapping[str, Any]] | None,
    event: str,
    messages: MessageCollectorProtocol,
    *,
    now: float | None = None,
    overdue_hours: int = 24,
) -> bool:
    """Return True if ``event`` is already scheduled.

    A scheduled match is also checked for being overdue.
    """
    for timestamp, hooks in (cron or {}).items():
        if next(iter(hooks), None) == event:
            check_overdue(timestamp, messages, now=now, overdue_hours=overdue_hours)
            return True
    return False


def check_overdue(
    timestamp: int,
    messages: MessageCollectorProtocol,
    *,
    now: float | None = None,
    overdue_hours: int = 24,
) -> bool:
    """Report an event scheduled more than ``overdue_hours`` ago. Returns True if overdue."""
    now = time.time() if now is None else now
    overdue_by = (now - timestamp) / 3600
    if overdue_by <= overdue_hours:
        return False

    log.warning("cron_overdue", timestamp=timestamp, hours=round(overdue_by, 1))
    messages.create_error_message(ErrorCode.CRON_OVERDUE, CRON_OVERDUE_MESSAGE)
    return True
