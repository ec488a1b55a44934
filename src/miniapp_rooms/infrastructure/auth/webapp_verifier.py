from __future__ import annotations

import hmac
import logging
from datetime import timedelta

from miniapp_rooms.application.dto.launch_data import AUTH_DATE_FIELD, LaunchData
from miniapp_rooms.application.exceptions import (
    ConfigurationError,
    ExpiredLaunchDataError,
    InvalidSignatureError,
)
from miniapp_rooms.application.ports.clock import Clock, SystemClock, seconds_since
from miniapp_rooms.infrastructure.auth.launch_data import (
    compute_signature,
    derive_secret_key,
    parse_launch_data,
)

logger = logging.getLogger(__name__)


class WebAppDataVerifier:
    """Verify mini-app launch data signed with the bot token."""

    def __init__(
        self,
        bot_token: str,
        *,
        max_age_seconds: int = 0,
        clock: Clock | None = None,
    ) -> None:
        if not bot_token:
            raise ConfigurationError("BOT_TOKEN is not configured")
        self._secret_key = derive_secret_key(bot_token)
        self._max_age = timedelta(seconds=max_age_seconds) if max_age_seconds > 0 else None
        self._clock = clock or SystemClock()

    async def verify(self, token: str) -> LaunchData:
        fields = parse_launch_data(token)
        expected = compute_signature(fields, self._secret_key)
        supplied = fields["hash"]
        if not hmac.compare_digest(expected.encode(), supplied.encode()):
            logger.warning(
                "Rejected launch data with invalid signature (fields=%s)",
                sorted(fields),
            )
            raise InvalidSignatureError("Invalid launch data signature")

        if self._max_age is not None:
            self._check_fresh(fields.get(AUTH_DATE_FIELD))
        return LaunchData(fields=fields)

    def _check_fresh(self, auth_date_raw: str | None) -> None:
        try:
            auth_date = int(auth_date_raw or "")
        except ValueError:
            raise ExpiredLaunchDataError("Launch data has no valid auth_date") from None

        age = seconds_since(self._clock, auth_date)
        if self._max_age is not None and age > self._max_age.total_seconds():
            logger.info("Rejected stale launch data (age=%.0fs)", age)
            raise ExpiredLaunchDataError("Launch data has expired")
