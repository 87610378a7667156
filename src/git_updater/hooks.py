"""Named filter hooks.

Replaces the host's global filter table with an explicit registry that is
passed to the components that expose extension points. Callbacks run in
ascending priority, ties in registration order; each receives the current
value plus the hook's extra arguments and returns the new value.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

log = structlog.get_logger()

REPO_CACHE_TIMEOUT = "gu_repo_cache_timeout"
REMOTE_IS_NEWER = "gu_remote_is_newer"
OVERRIDE_DOT_ORG = "gu_override_dot_org"
RUNNING_GIT_SERVERS = "gu_running_git_servers"
GET_REPO_PARTS = "gu_get_repo_parts"
PARSE_ENTERPRISE_HEADERS = "gu_parse_enterprise_headers"
DISABLE_WPCRON = "gu_disable_wpcron"

# Old name -> (version deprecated in, replacement)
DEPRECATED_HOOKS: dict[str, tuple[str, str]] = {
    "github_updater_repo_cache_timeout": ("10.0.0", REPO_CACHE_TIMEOUT),
    "github_updater_remote_is_newer": ("10.0.0", REMOTE_IS_NEWER),
    "github_updater_override_dot_org": ("10.0.0", OVERRIDE_DOT_ORG),
    "github_updater_disable_wpcron": ("10.0.0", DISABLE_WPCRON),
}

Filter = Callable[..., Any]


@dataclass(order=True)
class _Registration:
    priority: int
    sequence: int
    callback: Filter = field(compare=False)


class HookRegistry:
    def __init__(self) -> None:
        self._filters: dict[str, list[_Registration]] = {}
        self._sequence = 0

    def add_filter(self, name: str, callback: Filter, priority: int = 10) -> None:
        if name in DEPRECATED_HOOKS:
            since, replacement = DEPRECATED_HOOKS[name]
            log.warning("hook_deprecated", hook=name, since=since, replacement=replacement)
            name = replacement

        self._sequence += 1
        registrations = self._filters.setdefault(name, [])
        registrations.append(_Registration(priority, self._sequence, callback))
        registrations.sort()

    def remove_filter(self, name: str, callback: Filter) -> bool:
        name = DEPRECATED_HOOKS.get(name, ("", name))[1]
        registrations = self._filters.get(name, [])
        for registration in registrations:
            if registration.callback is callback:
                registrations.remove(registration)
                return True
        return False

    def has_filter(self, name: str) -> bool:
        return bool(self._filters.get(name))

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        for registration in list(self._filters.get(name, [])):
            value = registration.callback(value, *args)
        return value
