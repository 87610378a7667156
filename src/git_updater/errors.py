from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    INVALID_HEADER_KIND = "INVALID_HEADER_KIND"
    INVALID_INPUT = "INVALID_INPUT"
    CACHE_NOT_FOUND = "CACHE_NOT_FOUND"
    CRON_OVERDUE = "github_updater_cron_error"


class GitUpdaterError(Exception):
    """Raised for caller mistakes the core cannot recover from on its own.

    Infrastructure failures (SQLite, filesystem) never surface as this
    exception; those are logged and degrade at the component boundary.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str = "",
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }


@dataclass(frozen=True)
class UpstreamError:
    """A failed remote fetch, handed around in place of the fetched data."""

    code: str
    message: str = ""


def is_upstream_error(value: Any) -> bool:
    """Return True for values that flag a failed upstream fetch."""
    return isinstance(value, (UpstreamError, BaseException))
