"""Application state container.

AppState is created once per process by the CLI (or the embedding host) and
passed to the operations that need shared collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from git_updater.cache import RepoCache
    from git_updater.config import Settings
    from git_updater.headers import HeaderRegistry
    from git_updater.hooks import HookRegistry
    from git_updater.messages import MessageCollector
    from git_updater.models.repo import RepoConfigEntry
    from git_updater.protocols import OptionStoreProtocol


@dataclass
class AppState:
    """Holds all shared runtime state."""

    settings: Settings
    hooks: HookRegistry
    headers: HeaderRegistry
    messages: MessageCollector
    store: OptionStoreProtocol | None = None
    cache: RepoCache | None = None

    # Keyed by slug; loaded by the host's configuration step.
    plugin_configs: dict[str, RepoConfigEntry] = field(default_factory=dict)
    theme_configs: dict[str, RepoConfigEntry] = field(default_factory=dict)

    def all_configs(self) -> list[RepoConfigEntry]:
        return [*self.plugin_configs.values(), *self.theme_configs.values()]
