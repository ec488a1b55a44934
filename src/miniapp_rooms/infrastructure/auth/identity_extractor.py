from __future__ import annotations

import json
from typing import Any, Mapping

from miniapp_rooms.application.dto.identity_fields import IdentityFieldMap
from miniapp_rooms.application.dto.launch_data import LaunchData
from miniapp_rooms.application.exceptions import MalformedInputError, MissingIdentityError
from miniapp_rooms.domain.entities.identity import DEFAULT_LANGUAGE, Identity

# Identity ids are stored as BIGINT.
MIN_USER_ID = -(2**63)
MAX_USER_ID = 2**63 - 1

# Key names used inside the platform's nested user object.
_OBJECT_KEYS = IdentityFieldMap(
    id="id",
    first_name="first_name",
    last_name="last_name",
    username="username",
    language="language_code",
    user_object=None,
)


class FieldMapIdentityExtractor:
    """Read an Identity out of verified launch data using a field map."""

    def __init__(self, field_map: IdentityFieldMap | None = None) -> None:
        self._field_map = field_map or IdentityFieldMap()

    def extract(self, launch_data: LaunchData) -> Identity:
        object_field = self._field_map.user_object
        if object_field and object_field in launch_data:
            return _build(_load_object(launch_data.get(object_field)), _OBJECT_KEYS)
        return _build(launch_data.fields, self._field_map)


def _load_object(raw: str | None) -> Mapping[str, Any]:
    try:
        value = json.loads(raw or "")
    except json.JSONDecodeError as exc:
        raise MalformedInputError("User object is not valid JSON") from exc
    if not isinstance(value, dict):
        raise MalformedInputError("User object must be a JSON object")
    return value


def _build(source: Mapping[str, Any], keys: IdentityFieldMap) -> Identity:
    raw_id = source.get(keys.id)
    # bool is an int subclass; reject it explicitly
    if isinstance(raw_id, bool) or raw_id is None:
        raise MissingIdentityError("Launch data has no user id")
    try:
        user_id = int(str(raw_id).strip())
    except ValueError:
        raise MissingIdentityError(f"User id is not an integer: {raw_id!r}") from None
    if not MIN_USER_ID <= user_id <= MAX_USER_ID:
        raise MissingIdentityError(f"User id is out of range: {raw_id!r}")

    first_name = _text(source.get(keys.first_name))
    if not first_name:
        raise MissingIdentityError("Launch data has no user first name")

    return Identity(
        id=user_id,
        first_name=first_name,
        last_name=_text(source.get(keys.last_name)),
        username=_text(source.get(keys.username)),
        language=_text(source.get(keys.language)) or DEFAULT_LANGUAGE,
    )


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
