"""Repo metadata cache on top of the site-option store.

One option row per repo, keyed ``"ghu-" + md5(repo)``. The row holds a
``timeout`` (unix seconds) plus any number of named data fields written by
successive ``put()`` calls. Absent and expired rows are both a miss.

The read-modify-write in ``put()`` is not atomic: concurrent writers to the
same row race and the last one wins.
"""

from __future__ import annotations

import hashlib
import math
import time
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import structlog

from git_updater.errors import is_upstream_error
from git_updater.hooks import REPO_CACHE_TIMEOUT, HookRegistry
from git_updater.models.cache import CacheRecord

if TYPE_CHECKING:
    from git_updater.config import CacheSettings
    from git_updater.models.repo import RepoConfigEntry
    from git_updater.protocols import OptionStoreProtocol

log = structlog.get_logger()


class RepoCache:
    def __init__(
        self,
        store: OptionStoreProtocol,
        settings: CacheSettings,
        *,
        hooks: HookRegistry | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._settings = settings
        self._hooks = hooks or HookRegistry()
        self._clock = clock

    def cache_key(self, repo: str | None = None) -> str:
        repo = repo or self._settings.default_slug
        return self._settings.key_prefix + hashlib.md5(repo.encode("utf-8")).hexdigest()

    async def _read_fresh(self, key: str) -> dict[str, Any] | None:
        row = await self._store.get_option(key)
        if not isinstance(row, dict):
            return None
        timeout = row.get("timeout")
        # Only a finite positive number is a usable expiry.
        if isinstance(timeout, bool) or not isinstance(timeout, int | float):
            return None
        if not math.isfinite(timeout) or timeout <= 0 or self._clock() > timeout:
            return None
        return row

    async def get(self, repo: str | None = None) -> CacheRecord | None:
        """Return the fresh record for ``repo``, or ``None`` when absent or expired."""
        key = self.cache_key(repo)
        row = await self._read_fresh(key)
        if row is None:
            return None

        try:
            expires_at = datetime.fromtimestamp(row["timeout"], tz=UTC)
        except (OverflowError, OSError, ValueError):
            log.warning("cache_timeout_invalid", key=key, timeout=row["timeout"])
            return None

        data = {name: value for name, value in row.items() if name != "timeout"}
        return CacheRecord(key=key, data=data, expires_at=expires_at)

    async def put(
        self,
        id: str,
        value: Any,
        repo: str | None = None,
        ttl: timedelta | None = None,
    ) -> bool:
        """Store ``value`` under ``id`` in the repo's row.

        Error-flagged values are refused without touching the store. Other
        fields already present in a fresh row are kept; the row's timeout is
        reset to now + ttl.
        """
        if is_upstream_error(value):
            log.info("cache_put_rejected", id=id, repo=repo, reason="upstream_error")
            return False

        key = self.cache_key(repo)
        if ttl is None:
            ttl = timedelta(hours=self._settings.ttl_hours)
        ttl = self._hooks.apply_filters(REPO_CACHE_TIMEOUT, ttl, id, value, repo)

        row = await self._read_fresh(key) or {}
        row["timeout"] = int(self._clock() + ttl.total_seconds())
        row[id] = value

        written = await self._store.update_option(key, row)
        if written:
            log.debug("cache_put", id=id, repo=repo, key=key, timeout=row["timeout"])
        return written

    async def purge_all(self) -> int:
        """Delete every cache row, bounded to ``purge_batch_limit`` rows per call.

        Best-effort: returns the number of rows the store reports deleted.
        """
        pattern = f"%{self._settings.key_prefix}%"
        deleted = await self._store.delete_like(pattern, self._settings.purge_batch_limit)
        log.info("cache_purged", pattern=pattern, deleted=deleted)
        return deleted

    async def waiting_for_background_update(
        self,
        configs: Iterable[RepoConfigEntry],
        repo: RepoConfigEntry | None = None,
    ) -> bool:
        """Return True while any repo (or the given one) still lacks fresh data."""
        if repo is not None:
            return await self.get(repo.slug) is None

        for config in configs:
            if await self.get(config.slug) is None:
                return True
        return False
