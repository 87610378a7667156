"""The plugin's own settings row."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from git_updater.hooks import DISABLE_WPCRON, HookRegistry

if TYPE_CHECKING:
    from git_updater.protocols import OptionStoreProtocol

OPTIONS_KEY = "github_updater"

# Shown as a checked, disabled checkbox; never persisted.
FILTER_FORCED = "-1"


def modify_options(options: dict[str, Any], hooks: HookRegistry) -> dict[str, Any]:
    """Apply filter-driven settings without saving them.

    Values of ``-1`` saved by mistake are dropped first.
    """
    options = {key: value for key, value in options.items() if value != FILTER_FORCED}

    if "bypass_background_processing" not in options and hooks.apply_filters(
        DISABLE_WPCRON, False
    ):
        options["bypass_background_processing"] = FILTER_FORCED

    return options


async def load_options(store: OptionStoreProtocol, hooks: HookRegistry) -> dict[str, Any]:
    options = await store.get_option(OPTIONS_KEY)
    if not isinstance(options, dict):
        options = {}
    return modify_options(options, hooks)
