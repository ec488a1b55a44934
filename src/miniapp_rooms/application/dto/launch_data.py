from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

HASH_FIELD = "hash"
AUTH_DATE_FIELD = "auth_date"


@dataclass(frozen=True, slots=True)
class LaunchData:
    """Verified launch payload: every field from the token, `hash` included."""

    fields: Mapping[str, str] = field(default_factory=dict)

    @property
    def hash(self) -> str:
        return self.fields[HASH_FIELD]

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.fields.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self.fields
