"""Integration test fixtures.

Provides a fully wired AppState over an in-memory SQLite option store.
Repo config fixtures come from tests/conftest.py.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from git_updater.cache import RepoCache
from git_updater.config import Settings
from git_updater.headers import HeaderRegistry
from git_updater.messages import MessageCollector
from git_updater.state import AppState

if TYPE_CHECKING:
    from git_updater.hooks import HookRegistry
    from git_updater.models.repo import RepoConfigEntry
    from git_updater.store import OptionStore

    from tests.conftest import FakeClock


@pytest.fixture()
def app_state(
    store: OptionStore,
    hooks: HookRegistry,
    clock: FakeClock,
    plugin_configs: dict[str, RepoConfigEntry],
) -> AppState:
    settings = Settings(cache={"db_path": ":memory:"})
    headers = HeaderRegistry(hooks=hooks)
    headers.register_provider("GitHub")
    return AppState(
        settings=settings,
        hooks=hooks,
        headers=headers,
        messages=MessageCollector(),
        store=store,
        cache=RepoCache(store, settings.cache, hooks=hooks, clock=clock),
        plugin_configs=plugin_configs,
    )
