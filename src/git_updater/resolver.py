"""Repo identity and slug resolution.

Pure business logic: receives URLs and repo configs, returns identities and
slugs. No knowledge of the option store or hooks.
"""

from __future__ import annotations

import posixpath
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from git_updater.models.repo import RepoIdentity
from git_updater.sanitize import sanitize

if TYPE_CHECKING:
    from collections.abc import Mapping

    from git_updater.models.repo import RepoConfigEntry


def parse_header_uri(repo_header: str) -> RepoIdentity:
    """Split a repository URL into its identity parts.

    ``https://github.com/owner/repo.git`` gives owner ``owner``, repo ``repo``,
    base_uri ``https://github.com`` and uri ``https://github.com/owner/repo.git``.
    """
    parts = urlsplit(repo_header)
    path = parts.path
    trimmed_path = path.rstrip("/") or path

    basename = posixpath.basename(trimmed_path)
    stem, extension = posixpath.splitext(basename)
    repo = stem if extension == ".git" else basename
    owner = posixpath.dirname(trimmed_path).strip("/")

    header = {
        "original": repo_header,
        "scheme": parts.scheme or None,
        "host": parts.hostname or None,
        "owner": owner,
        "repo": repo,
        "owner_repo": f"{owner}/{repo}",
        "base_uri": repo_header.replace(path, "") if path else repo_header,
        "uri": repo_header.strip("/") if parts.scheme else None,
    }
    return RepoIdentity(**sanitize(header))


def _directory_name(file: str) -> str:
    return posixpath.dirname(file) or "."


def resolve_slug(slug: str, configs: Mapping[str, RepoConfigEntry]) -> str | None:
    """Match an installed directory slug to a configured repo slug.

    The host may install ``<repo>-<branch>`` (e.g. ``my-plugin-main``), so the
    slug minus its last ``-`` segment is tried as a fallback. An exact match
    on either the config slug or the config file's directory always wins;
    otherwise the last fallback match is returned, else None.
    """
    rename = "-".join(slug.split("-")[:-1])
    if slug in configs:
        rename = slug

    matched: str | None = None
    for config in configs.values():
        candidates = (config.slug, _directory_name(config.file))

        if slug in candidates:
            return config.slug

        # Soft match, an exact match may still follow.
        if rename and rename in candidates:
            matched = config.slug

    return matched
