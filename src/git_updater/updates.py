"""Update gating for configured repos.

Decides whether a repo may be updated, whether the host's public directory
should be overridden and whether a release asset is the download to use.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog
from packaging.version import InvalidVersion, Version

from git_updater.hooks import (
    OVERRIDE_DOT_ORG,
    REMOTE_IS_NEWER,
    RUNNING_GIT_SERVERS,
    HookRegistry,
)
from git_updater.models.repo import HeaderKind, RepoConfigEntry

log = structlog.get_logger()


def _version_at_least(current: str, required: str | None) -> bool:
    if not required:
        return True
    try:
        return Version(current) >= Version(required)
    except InvalidVersion:
        log.warning("version_unparseable", current=current, required=required)
        return False


def remote_is_newer(repo: RepoConfigEntry) -> bool:
    if repo.remote_version is None:
        return False
    try:
        return Version(repo.remote_version) > Version(repo.local_version)
    except InvalidVersion:
        log.warning(
            "version_unparseable",
            slug=repo.slug,
            remote=repo.remote_version,
            local=repo.local_version,
        )
        return False


def can_update_repo(
    repo: RepoConfigEntry,
    *,
    host_version: str,
    runtime_version: str,
    hooks: HookRegistry,
) -> bool:
    """Return True if the remote is newer and the host/runtime requirements are met.

    ``gu_remote_is_newer`` callbacks receive (is_newer, repo) and may replace
    the version comparison.
    """
    host_ok = _version_at_least(host_version, repo.requires)
    runtime_ok = _version_at_least(runtime_version, repo.requires_php)
    newer = hooks.apply_filters(REMOTE_IS_NEWER, remote_is_newer(repo), repo)
    return bool(newer) and host_ok and runtime_ok


def is_private(
    repo: RepoConfigEntry,
    options: Mapping[str, Any],
    *,
    doing_ajax: bool = False,
) -> bool:
    """Return True for repos that need (or have) an access token.

    A repo whose remote version was never fetched, or came back as
    ``0.0.0``, is assumed private, as is any repo with a saved token option.
    """
    if doing_ajax:
        return False
    if repo.remote_version is None:
        return True
    return repo.remote_version == "0.0.0" or bool(options.get(repo.slug))


def override_dot_org(
    kind: HeaderKind,
    repo: RepoConfigEntry,
    *,
    hooks: HookRegistry,
    skip_updates: Iterable[Mapping[str, Any]] | None = None,
    settings_page: bool = False,
) -> bool:
    """Return True when updates should come from git rather than the public directory."""
    if settings_page:
        dot_org_primary = True
    else:
        dot_org_primary = repo.dot_org and repo.primary_branch == repo.branch

    transient_keys = {"plugin": repo.file, "theme": repo.slug}
    transient_key = transient_keys.get(kind)

    override = transient_key in hooks.apply_filters(OVERRIDE_DOT_ORG, [])

    if not override and skip_updates is not None:
        override = any(repo.file == skip.get("slug") for skip in skip_updates)

    return not dot_org_primary or override


def use_release_asset(repo: RepoConfigEntry, branch_switch: str | None = None) -> bool:
    """Return True if the release asset, not the branch archive, should be installed."""
    is_tag = bool(branch_switch) and branch_switch not in repo.branches
    switch_primary_or_tag = repo.primary_branch == branch_switch or is_tag
    current_primary_no_switch = repo.primary_branch == repo.branch and branch_switch is None

    need_release_asset = switch_primary_or_tag or current_primary_no_switch
    return repo.release_asset and repo.newest_tag != "0.0.0" and need_release_asset


def running_git_servers(configs: Iterable[RepoConfigEntry], hooks: HookRegistry) -> list[str]:
    """Return the distinct git servers in use, in first-seen order."""
    repos = list(configs)
    gits = [repo.git for repo in repos]
    gits = hooks.apply_filters(RUNNING_GIT_SERVERS, gits, repos)
    return list(dict.fromkeys(gits))
