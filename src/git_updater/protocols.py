"""Protocol interfaces for swappable components.

RepoCache and the options loader reference OptionStoreProtocol, not the
concrete SQLite store. This allows:
- Tests to use lightweight in-memory implementations
- Other key-value backends to be swapped in without changing cache code
"""

from __future__ import annotations

from typing import Any, Protocol


class OptionStoreProtocol(Protocol):
    """Interface for the site-option key-value backend."""

    async def get_option(self, name: str) -> Any | None: ...

    async def update_option(self, name: str, value: Any) -> bool: ...

    async def delete_option(self, name: str) -> bool: ...

    async def delete_like(self, pattern: str, limit: int) -> int: ...


class MessageCollectorProtocol(Protocol):
    """Interface for the user-visible message sink."""

    def create_error_message(self, code: str, message: str) -> None: ...
