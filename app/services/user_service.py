"""
User profile service and account lifecycle emails.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from app.exceptions import ConflictError, NotFoundError
from app.mappers.user_mapper import UserMapper
from app.repositories.users import UserRepository
from app.schemas import UserResponse
from app.services.email_service import EmailService

logger = logging.getLogger(__name__)

INVITE_ORGANIZATION = "Cuerpo de Banderas"
INVITE_ROLES = ["Administrador"]


class UserService:
    def __init__(self, session, email_service: EmailService):
        self.session = session
        self.repository = UserRepository(session)
        self.email_service = email_service

    async def get_user(self, user_id: str) -> Optional[UserResponse]:
        user = await self.repository.get(user_id)
        return UserMapper.entity_to_model(user) if user else None

    async def create_user(
        self, data: Dict[str, Any], send_invite: bool = False, language: str = "es"
    ) -> Tuple[UserResponse, bool]:
        """
        Create a user, optionally emailing an invitation.

        Returns:
            (user, whether an invitation email went out)
        """
        if await self.repository.get_by_email(data["email"]):
            raise ConflictError("User already exists", details=data["email"])

        user = await self.repository.create(UserMapper.model_to_entity(data))
        await self.session.commit()
        logger.info(f"Created user {user.id[:8]}... ({user.email})")

        invited = False
        if send_invite:
            full_name = " ".join(p for p in (user.first_name, user.last_name) if p) or user.user_name
            accept_url = f"{self.email_service.frontend_url.rstrip('/')}/"
            invited = await self.email_service.send_invite_email(
                user.email, full_name, INVITE_ORGANIZATION, INVITE_ROLES, accept_url, language
            )

        return UserMapper.entity_to_model(user), invited

    async def update_user(self, user_id: str, data: Dict[str, Any]) -> Optional[UserResponse]:
        user = await self.repository.get(user_id)
        if user is None:
            return None

        user = await self.repository.update(user, UserMapper.model_to_entity(data))
        await self.session.commit()
        logger.info(f"Updated user {user_id[:8]}...")
        return UserMapper.entity_to_model(user)

    async def verify_email_complete(self, user_id: str, language: str = "es") -> Tuple[UserResponse, bool]:
        """
        Called once a user has confirmed their email address; sends the
        welcome email.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.repository.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        sent = await self.email_service.send_welcome_email(user.email, user.first_name, user.last_name, language)
        if not sent:
            logger.warning(f"Welcome email could not be delivered to {user.email}")
        return UserMapper.entity_to_model(user), sent
