from __future__ import annotations

from miniapp_rooms.domain.entities.identity import Identity
from miniapp_rooms.infrastructure.db.models.identity import IdentityModel


def model_to_entity(model: IdentityModel) -> Identity:
    return Identity(
        id=model.id,
        first_name=model.first_name,
        last_name=model.last_name,
        username=model.username,
        language=model.language,
    )


def entity_to_values(entity: Identity) -> dict[str, object]:
    return {
        "id": entity.id,
        "first_name": entity.first_name,
        "last_name": entity.last_name,
        "username": entity.username,
        "language": entity.language,
    }
