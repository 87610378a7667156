"""File header parsing for plugins and themes.

A header is a ``Label: value`` line in the comment block at the top of a
plugin's main file or a theme's ``style.css``. Each field is looked up by its
label; the first matching line wins and only fields with a value are kept.

Git providers contribute extra headers (``GitHub Plugin URI``,
``GitHub Languages``, ...) through a HeaderRegistry.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from git_updater.errors import ErrorCode, GitUpdaterError
from git_updater.hooks import GET_REPO_PARTS, PARSE_ENTERPRISE_HEADERS, HookRegistry
from git_updater.models.repo import HeaderKind, RepoIdentity, RepoParts

DEFAULT_PLUGIN_HEADERS: dict[str, str] = {
    "Name": "Plugin Name",
    "PluginURI": "Plugin URI",
    "Version": "Version",
    "Description": "Description",
    "Author": "Author",
    "AuthorURI": "Author URI",
    "TextDomain": "Text Domain",
    "DomainPath": "Domain Path",
    "Network": "Network",
    "Requires": "Requires at least",
    "RequiresPHP": "Requires PHP",
}

DEFAULT_THEME_HEADERS: dict[str, str] = {
    "Name": "Theme Name",
    "ThemeURI": "Theme URI",
    "Description": "Description",
    "Author": "Author",
    "AuthorURI": "Author URI",
    "Version": "Version",
    "Template": "Template",
    "Status": "Status",
    "Tags": "Tags",
    "TextDomain": "Text Domain",
    "DomainPath": "Domain Path",
    "Requires": "Requires at least",
    "RequiresPHP": "Requires PHP",
}

_DEFAULT_HEADERS: dict[str, dict[str, str]] = {
    "plugin": DEFAULT_PLUGIN_HEADERS,
    "theme": DEFAULT_THEME_HEADERS,
}

# Suffix -> label, qualified per provider as "<Provider> <label>"
DEFAULT_EXTRA_REPO_HEADERS: dict[str, str] = {
    "Languages": "Languages",
    "CIJob": "CI Job",
}

DEFAULT_REPO_TYPES: dict[str, dict[str, str]] = {
    "types": {"GitHub": "github_{type}"},
    "uris": {"GitHub": "https://github.com/"},
}

_COMMENT_END_RE = re.compile(r"\s*(?:\*/|\?>).*", re.DOTALL)


def cleanup_header_comment(value: str) -> str:
    """Strip a closing ``*/`` or ``?>`` (and anything after it) from a header value."""
    return _COMMENT_END_RE.sub("", value).strip()


class HeaderRegistry:
    """Extra header tables contributed by git provider integrations."""

    def __init__(
        self,
        *,
        hooks: HookRegistry | None = None,
        extra_repo_headers: Mapping[str, str] | None = None,
    ) -> None:
        self.hooks = hooks or HookRegistry()
        self.extra_headers: dict[str, str] = {}
        self.extra_repo_headers: dict[str, str] = dict(
            DEFAULT_EXTRA_REPO_HEADERS if extra_repo_headers is None else extra_repo_headers
        )

    def add_headers(self, headers: Mapping[str, str]) -> None:
        self.extra_headers.update(headers)

    def register_provider(
        self, provider: str, kinds: Iterable[HeaderKind] = ("plugin", "theme")
    ) -> None:
        """Add the headers a provider's repos are declared with.

        For ``GitHub`` this adds ``GitHubPluginURI: GitHub Plugin URI``,
        ``GitHubLanguages: GitHub Languages`` and so on, plus the shared
        ``Release Asset`` and ``Primary Branch`` headers.
        """
        headers: dict[str, str] = {}
        for kind in kinds:
            label = kind.capitalize()
            headers[f"{provider}{label}URI"] = f"{provider} {label} URI"
        for suffix, label in self.extra_repo_headers.items():
            headers[f"{provider}{suffix}"] = f"{provider} {label}"
        headers["ReleaseAsset"] = "Release Asset"
        headers["PrimaryBranch"] = "Primary Branch"
        self.add_headers(headers)

    def headers_for(self, kind: HeaderKind) -> dict[str, str]:
        """Return the default header table for ``kind`` plus the extra headers.

        Labels are unique in the result: a later field reusing a label is dropped.
        """
        defaults = _DEFAULT_HEADERS.get(kind)
        if defaults is None:
            raise GitUpdaterError(
                code=ErrorCode.INVALID_HEADER_KIND,
                message=f"Unknown header kind: {kind!r}",
                suggestion="Use 'plugin' or 'theme'.",
            )

        all_headers: dict[str, str] = {}
        seen_labels: set[str] = set()
        for field, label in {**defaults, **self.extra_headers}.items():
            if label in seen_labels:
                continue
            seen_labels.add(label)
            all_headers[field] = label
        return all_headers

    def extract_file_headers(
        self, contents: str | Mapping[str, Any], kind: HeaderKind
    ) -> dict[str, Any]:
        """Parse header fields from file contents.

        ``contents`` may be raw file text or an already-parsed header mapping.
        A mapping is returned as-is apart from dropping empty values; the
        header table is not applied to it.
        """
        all_headers: dict[str, Any] = self.headers_for(kind)

        if isinstance(contents, str):
            # Catch CR-only line endings.
            file_data = contents.replace("\r", "\n")
            for field, label in all_headers.items():
                pattern = r"^[ \t/*#@]*" + re.escape(label) + r":(.*)$"
                match = re.search(pattern, file_data, re.MULTILINE | re.IGNORECASE)
                if match and match.group(1):
                    all_headers[field] = cleanup_header_comment(match.group(1))
                else:
                    all_headers[field] = ""
        else:
            all_headers = dict(contents)

        # "0" counts as empty.
        return {
            field: value for field, value in all_headers.items() if value and value != "0"
        }

    def repo_parts(self, provider: str, type: str) -> RepoParts:
        """Describe ``provider`` for repos of ``type`` (``plugin``/``theme``).

        A ``<provider>_`` prefix on ``type`` is ignored. Unknown providers
        return ``RepoParts(matched=False)``.
        """
        type = re.sub(re.escape(provider.lower()) + "_", "", type)

        repos = {
            "types": {
                name: template.format(type=type)
                for name, template in DEFAULT_REPO_TYPES["types"].items()
            },
            "uris": dict(DEFAULT_REPO_TYPES["uris"]),
        }
        repos = self.hooks.apply_filters(GET_REPO_PARTS, repos, type)

        if provider not in repos["types"]:
            return RepoParts()

        return RepoParts(
            matched=True,
            type=repos["types"][provider],
            git_server=provider.lower(),
            base_uri=repos["uris"][provider],
            extra={
                suffix: f"{provider} {label}"
                for suffix, label in self.extra_repo_headers.items()
            },
        )

    def parse_extra_headers(
        self,
        header: RepoIdentity | Mapping[str, Any],
        headers: Mapping[str, Any],
        provider: str,
    ) -> dict[str, Any]:
        """Add enterprise, language, CI job, release asset and branch data.

        ``header`` is a parsed repo identity (model or mapping), ``headers`` the file
        headers and ``provider`` the git host name, e.g. ``GitHub``.
        Provider-specific headers are read as ``headers[provider + suffix]``.
        """
        if isinstance(header, RepoIdentity):
            header = header.model_dump()
        result: dict[str, Any] = dict(header)
        result["enterprise_uri"] = None
        result["enterprise_api"] = None
        result["languages"] = None
        result["ci_job"] = False
        result["release_asset"] = False
        result["primary_branch"] = False

        if result.get("host"):
            if provider == "GitHub" and "github.com" not in result["host"]:
                result["enterprise_uri"] = result["base_uri"]
                result["enterprise_api"] = result["enterprise_uri"].strip("/") + "/api/v3"

            result = self.hooks.apply_filters(PARSE_ENTERPRISE_HEADERS, result, provider)

        for suffix in self.extra_repo_headers:
            value = headers.get(provider + suffix)
            if not value:
                continue
            if suffix == "Languages":
                result["languages"] = value
            elif suffix == "CIJob":
                result["ci_job"] = value

        if not result["release_asset"] and headers.get("ReleaseAsset"):
            result["release_asset"] = headers["ReleaseAsset"] == "true"
        if not result["primary_branch"]:
            result["primary_branch"] = headers.get("PrimaryBranch") or "master"

        return result
