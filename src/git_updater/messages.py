"""Collector for user-visible notices raised while handling a request."""

from __future__ import annotations

import structlog

from git_updater.models.messages import Message

log = structlog.get_logger()


class MessageCollector:
    """In-memory MessageCollectorProtocol; the host renders ``messages``."""

    def __init__(self) -> None:
        self._messages: list[Message] = []

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    def create_error_message(self, code: str, message: str) -> None:
        # The same notice is shown once per request.
        if any(m.code == code and m.message == message for m in self._messages):
            return
        self._messages.append(Message(code=code, message=message, level="error"))
        log.warning("message_created", code=code, message=message)

    def clear(self) -> None:
        self._messages.clear()
