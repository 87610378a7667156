from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class Message(BaseModel):
    """A user-visible notice collected during a request."""

    code: str
    message: str
    level: Literal["error", "warning", "info"] = "error"
