from __future__ import annotations

from git_updater.models.cache import CacheRecord
from git_updater.models.messages import Message
from git_updater.models.repo import HeaderKind, RepoConfigEntry, RepoIdentity, RepoParts

__all__ = [
    # cache
    "CacheRecord",
    # repo
    "HeaderKind",
    "RepoConfigEntry",
    "RepoIdentity",
    "RepoParts",
    # messages
    "Message",
]
