from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from miniapp_rooms.application.exceptions import ConfigurationError

IDENTITY_KEYS = ("id", "first_name", "last_name", "username", "language")


@dataclass(frozen=True, slots=True)
class IdentityFieldMap:
    """Where identity claims live inside launch data.

    Flat keys are read directly from the launch data. When ``user_object``
    names a field holding a JSON object, that object is used instead and read
    with the platform's own key names.
    """

    id: str = "user_id"
    first_name: str = "user_first_name"
    last_name: str = "user_last_name"
    username: str = "user_username"
    language: str = "user_language_code"
    user_object: str | None = "user"

    @classmethod
    def from_mapping(
        cls, flat: Mapping[str, str], user_object: str | None = "user",
    ) -> IdentityFieldMap:
        unknown = sorted(set(flat) - set(IDENTITY_KEYS))
        if unknown:
            raise ConfigurationError(
                f"Unknown identity field(s) {unknown}; expected a subset of {list(IDENTITY_KEYS)}"
            )
        return cls(**flat, user_object=user_object or None)
