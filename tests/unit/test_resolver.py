"""Unit tests for git_updater.resolver."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from git_updater.models.repo import RepoConfigEntry
from git_updater.resolver import parse_header_uri, resolve_slug


def _configs(*entries: RepoConfigEntry) -> dict[str, RepoConfigEntry]:
    return {entry.slug: entry for entry in entries}


# ---------------------------------------------------------------------------
# parse_header_uri
# ---------------------------------------------------------------------------


class TestParseHeaderUri:
    def test_github_url_with_git_extension(self) -> None:
        identity = parse_header_uri("https://github.com/owner/repo-name.git")
        assert identity.scheme == "https"
        assert identity.host == "github.com"
        assert identity.owner == "owner"
        assert identity.repo == "repo-name"
        assert identity.owner_repo == "owner/repo-name"
        assert identity.base_uri == "https://github.com"
        assert identity.uri == "https://github.com/owner/repo-name.git"
        assert identity.original == "https://github.com/owner/repo-name.git"

    def test_url_without_extension(self) -> None:
        identity = parse_header_uri("https://github.com/afragen/git-updater")
        assert identity.owner == "afragen"
        assert identity.repo == "git-updater"

    def test_other_extension_kept(self) -> None:
        identity = parse_header_uri("https://example.com/owner/archive.zip")
        assert identity.repo == "archive.zip"

    def test_trailing_slash(self) -> None:
        identity = parse_header_uri("https://github.com/owner/repo/")
        assert identity.owner == "owner"
        assert identity.repo == "repo"
        assert identity.uri == "https://github.com/owner/repo"

    def test_enterprise_host_with_port(self) -> None:
        identity = parse_header_uri("https://git.example.com:8443/team/project")
        assert identity.host == "git.example.com"
        assert identity.base_uri == "https://git.example.com:8443"
        assert identity.owner_repo == "team/project"

    def test_nested_group_path(self) -> None:
        identity = parse_header_uri("https://gitlab.com/group/subgroup/project")
        assert identity.owner == "group/subgroup"
        assert identity.repo == "project"

    def test_without_scheme_has_no_uri(self) -> None:
        identity = parse_header_uri("owner/repo")
        assert identity.scheme == ""
        assert identity.host == ""
        assert identity.owner == "owner"
        assert identity.repo == "repo"
        assert identity.uri == ""

    def test_values_are_sanitized(self) -> None:
        identity = parse_header_uri("https://github.com/owner/<b>repo</b>")
        assert "<" not in identity.repo
        assert "<" not in identity.original

    def test_identity_is_immutable(self) -> None:
        identity = parse_header_uri("https://github.com/owner/repo")
        with pytest.raises(ValidationError):
            identity.repo = "other"  # type: ignore[misc]
        assert identity.repo == "repo"


# ---------------------------------------------------------------------------
# resolve_slug
# ---------------------------------------------------------------------------


class TestResolveSlug:
    def test_branch_suffix_falls_back_to_repo_slug(self) -> None:
        configs = _configs(RepoConfigEntry(slug="my-plugin", file="my-plugin/my-plugin.php"))
        assert resolve_slug("my-plugin-main", configs) == "my-plugin"

    def test_master_suffix(self) -> None:
        configs = _configs(RepoConfigEntry(slug="my-plugin", file="my-plugin/my-plugin.php"))
        assert resolve_slug("my-plugin-master", configs) == "my-plugin"

    def test_exact_match(self) -> None:
        configs = _configs(RepoConfigEntry(slug="my-plugin", file="my-plugin/my-plugin.php"))
        assert resolve_slug("my-plugin", configs) == "my-plugin"

    def test_exact_match_wins_over_earlier_fallback(self) -> None:
        configs = _configs(
            RepoConfigEntry(slug="my", file="my/my.php"),
            RepoConfigEntry(slug="my-plugin", file="my-plugin/my-plugin.php"),
        )
        assert resolve_slug("my-plugin", configs) == "my-plugin"

    def test_exact_match_on_unconfigured_directory_beats_fallback(self) -> None:
        configs = _configs(
            RepoConfigEntry(slug="tools", file="tools/tools.php"),
            RepoConfigEntry(slug="tools-pro", file="tools-extra/tools-pro.php"),
        )
        # "tools-extra" is not a configured slug, so "tools" is the fallback
        # candidate, but the second entry's directory matches exactly.
        assert resolve_slug("tools-extra", configs) == "tools-pro"

    def test_exact_match_by_directory(self) -> None:
        configs = _configs(
            RepoConfigEntry(slug="other-plugin", file="other-plugin-dir/other-plugin.php")
        )
        assert resolve_slug("other-plugin-dir", configs) == "other-plugin"

    def test_fallback_by_directory(self) -> None:
        configs = _configs(
            RepoConfigEntry(slug="fancy", file="fancy-dir/fancy.php"),
        )
        assert resolve_slug("fancy-dir-develop", configs) == "fancy"

    def test_last_fallback_match_wins(self) -> None:
        configs = _configs(
            RepoConfigEntry(slug="shared", file="shared/shared.php"),
            RepoConfigEntry(slug="shared-alt", file="shared/shared-alt.php"),
        )
        assert resolve_slug("shared-main", configs) == "shared-alt"

    def test_no_match_returns_none(self) -> None:
        configs = _configs(RepoConfigEntry(slug="my-plugin", file="my-plugin/my-plugin.php"))
        assert resolve_slug("unrelated-thing", configs) is None

    def test_slug_without_dash_has_no_fallback(self) -> None:
        configs = _configs(RepoConfigEntry(slug="theme", file="style.css"))
        assert resolve_slug("plugin", configs) is None

    def test_theme_slug_as_file(self) -> None:
        configs = _configs(RepoConfigEntry(slug="my-theme", file="my-theme", kind="theme"))
        assert resolve_slug("my-theme-main", configs) == "my-theme"

    def test_empty_configs(self) -> None:
        assert resolve_slug("my-plugin", {}) is None
