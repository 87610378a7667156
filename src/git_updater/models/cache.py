from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class CacheRecord(BaseModel):
    """Fresh repo cache row as returned by RepoCache.get()."""

    key: str  # "ghu-" + md5(repo)
    data: dict[str, Any]  # Every named field except "timeout"
    expires_at: datetime

    def __getitem__(self, field: str) -> Any:
        return self.data[field]

    def __contains__(self, field: object) -> bool:
        return field in self.data
