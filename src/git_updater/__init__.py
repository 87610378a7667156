"""Git Updater core: repo cache, header parsing and slug normalisation.

The names re-exported here are what host integrations use; everything else is
reachable through the submodules.
"""

from __future__ import annotations

import warnings
from importlib.metadata import PackageNotFoundError, version

from git_updater.cache import RepoCache
from git_updater.errors import ErrorCode, GitUpdaterError, UpstreamError
from git_updater.headers import HeaderRegistry
from git_updater.hooks import HookRegistry
from git_updater.resolver import parse_header_uri, resolve_slug

DIST_NAME = "git-updater"
UNKNOWN_VERSION = "0.0.0+unknown"


def _installed_version() -> str:
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        # Running from a source checkout that was never installed.
        warnings.warn(
            f"No installed metadata for {DIST_NAME!r}; reporting version {UNKNOWN_VERSION!r}.",
            RuntimeWarning,
            stacklevel=3,
        )
        return UNKNOWN_VERSION


__version__ = _installed_version()

__all__ = [
    "ErrorCode",
    "GitUpdaterError",
    "HeaderRegistry",
    "HookRegistry",
    "RepoCache",
    "UpstreamError",
    "__version__",
    "parse_header_uri",
    "resolve_slug",
]
