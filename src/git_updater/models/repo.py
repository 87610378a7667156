from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

HeaderKind = Literal["plugin", "theme"]


class RepoIdentity(BaseModel):
    """Canonical identity derived once from a repository URL."""

    model_config = ConfigDict(frozen=True)

    original: str = ""
    scheme: str = ""
    host: str = ""
    owner: str = ""
    repo: str = ""
    owner_repo: str = ""
    base_uri: str = ""
    uri: str = ""  # Canonical URI; empty when the source had no scheme


class RepoConfigEntry(BaseModel):
    """One installed plugin or theme, as loaded by the host's config step."""

    model_config = ConfigDict(extra="allow")

    slug: str
    file: str = ""  # e.g. "my-plugin/my-plugin.php" for plugins, the slug for themes
    git: str = "github"
    kind: HeaderKind = "plugin"
    branch: str = "master"
    primary_branch: str = "master"
    branches: dict[str, str] = Field(default_factory=dict)
    local_version: str = "0.0.0"
    remote_version: str | None = None
    newest_tag: str = "0.0.0"
    requires: str | None = None
    requires_php: str | None = None
    dot_org: bool = False
    release_asset: bool = False


class RepoParts(BaseModel):
    """Provider lookup result used when parsing provider-prefixed headers."""

    matched: bool = False
    type: str = ""  # e.g. "github_plugin"
    git_server: str = ""  # e.g. "github"
    base_uri: str = ""
    # Extra repo header suffix -> provider-qualified label, e.g. "CIJob" -> "GitHub CI Job"
    extra: dict[str, str] = Field(default_factory=dict)
