"""Shared test fixtures for the git_updater test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import aiosqlite
import pytest

from git_updater.cache import RepoCache
from git_updater.config import CacheSettings
from git_updater.headers import HeaderRegistry
from git_updater.hooks import HookRegistry
from git_updater.models.repo import RepoConfigEntry
from git_updater.store import OptionStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

START = 1_700_000_000.0


class FakeClock:
    """Controllable replacement for time.time()."""

    def __init__(self, now: float = START) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def hooks() -> HookRegistry:
    return HookRegistry()


@pytest.fixture()
def header_registry(hooks: HookRegistry) -> HeaderRegistry:
    registry = HeaderRegistry(hooks=hooks)
    registry.register_provider("GitHub")
    return registry


@pytest.fixture()
async def store() -> AsyncIterator[OptionStore]:
    async with aiosqlite.connect(":memory:") as db:
        store = OptionStore(db)
        await store.init_db()
        yield store


@pytest.fixture()
def cache(store: OptionStore, hooks: HookRegistry, clock: FakeClock) -> RepoCache:
    return RepoCache(store, CacheSettings(db_path=":memory:"), hooks=hooks, clock=clock)


@pytest.fixture()
def plugin_configs() -> dict[str, RepoConfigEntry]:
    """Minimal installed plugins, keyed by slug like the host's config step."""
    return {
        "my-plugin": RepoConfigEntry(
            slug="my-plugin",
            file="my-plugin/my-plugin.php",
            git="github",
            local_version="1.0.0",
            remote_version="1.1.0",
        ),
        "other-plugin": RepoConfigEntry(
            slug="other-plugin",
            file="other-plugin-dir/other-plugin.php",
            git="gitlab",
            local_version="2.0.0",
            remote_version="2.0.0",
        ),
    }
