"""
Conversion between the API shape of a user and its table row.
The table stores config_step as text; the API exposes it as an integer.
"""
from typing import Any, Dict

from app.models import User
from app.schemas import UserResponse


class UserMapper:
    @staticmethod
    def model_to_entity(data: Dict[str, Any]) -> Dict[str, Any]:
        """API fields -> column values. Only keys present in data are mapped."""
        entity = dict(data)
        if "config_step" in entity:
            entity["config_step"] = str(entity["config_step"] or 0)
        return entity

    @staticmethod
    def entity_to_model(user: User) -> UserResponse:
        try:
            config_step = int(user.config_step)
        except (TypeError, ValueError):
            config_step = 0

        return UserResponse(
            id=user.id,
            email=user.email,
            user_name=user.user_name,
            first_name=user.first_name,
            last_name=user.last_name,
            company=user.company,
            config_step=config_step,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
