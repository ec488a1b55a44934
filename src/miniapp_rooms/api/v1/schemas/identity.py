from __future__ import annotations

from pydantic import BaseModel


class IdentityResponse(BaseModel):
    id: int
    first_name: str
    last_name: str | None = None
    username: str | None = None
    language: str

    model_config = {"from_attributes": True}
