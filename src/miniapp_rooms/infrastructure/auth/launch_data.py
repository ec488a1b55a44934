"""Launch-data wire format and signing scheme.

The token is a URL-query string of ``key=value`` pairs, one of which is
``hash``. The signed message is every other pair, sorted by key and joined
with newlines. The signing key is itself an HMAC of the bot token keyed by the
constant ``WebAppData``. All of this must stay bit-exact with the platform
client.
"""
from __future__ import annotations

import hashlib
import hmac
from typing import Mapping
from urllib.parse import parse_qsl, urlencode

from miniapp_rooms.application.dto.launch_data import HASH_FIELD
from miniapp_rooms.application.exceptions import MalformedInputError

SECRET_KEY_LABEL = b"WebAppData"


def parse_launch_data(token: str) -> dict[str, str]:
    """Decode a launch token into a field mapping.

    Raises MalformedInputError on bad encoding, repeated keys, or no ``hash``.
    """
    if not token:
        raise MalformedInputError("Launch data is empty")
    try:
        pairs = parse_qsl(token, keep_blank_values=True, strict_parsing=True)
    except ValueError as exc:
        raise MalformedInputError(f"Launch data is not a valid query string: {exc}") from exc

    fields: dict[str, str] = {}
    for key, value in pairs:
        if key in fields:
            raise MalformedInputError(f"Duplicate launch data field: {key}")
        fields[key] = value

    if HASH_FIELD not in fields:
        raise MalformedInputError("Launch data has no hash")
    return fields


def canonicalize(fields: Mapping[str, str]) -> str:
    return "\n".join(
        f"{key}={value}"
        for key, value in sorted(fields.items())
        if key != HASH_FIELD
    )


def derive_secret_key(bot_token: str) -> bytes:
    return hmac.new(SECRET_KEY_LABEL, bot_token.encode(), hashlib.sha256).digest()


def compute_signature(fields: Mapping[str, str], secret_key: bytes) -> str:
    message = canonicalize(fields).encode()
    return hmac.new(secret_key, message, hashlib.sha256).hexdigest()


def sign_launch_data(fields: Mapping[str, str], bot_token: str) -> str:
    """Build a launch token the way the platform client does."""
    unsigned = {k: v for k, v in fields.items() if k != HASH_FIELD}
    signature = compute_signature(unsigned, derive_secret_key(bot_token))
    return urlencode([*unsigned.items(), (HASH_FIELD, signature)])
