from __future__ import annotations

from dataclasses import dataclass

DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True, slots=True)
class Identity:
    """Platform user, keyed by the platform's numeric user id."""

    id: int
    first_name: str
    last_name: str | None = None
    username: str | None = None
    language: str = DEFAULT_LANGUAGE
