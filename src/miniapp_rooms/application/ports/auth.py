from __future__ import annotations

from typing import Protocol

from miniapp_rooms.application.dto.launch_data import LaunchData
from miniapp_rooms.domain.entities.identity import Identity


class LaunchDataVerifier(Protocol):
    async def verify(self, token: str) -> LaunchData: ...


class IdentityExtractor(Protocol):
    def extract(self, launch_data: LaunchData) -> Identity: ...
