from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError
from app.models import User


class UserRepository:
    """Works on storage-shaped dicts produced by UserMapper."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def create(self, data: Dict[str, Any]) -> User:
        user = User(**data)
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("User already exists", details=str(e.orig))
        await self.session.refresh(user)
        return user

    async def update(self, user: User, data: Dict[str, Any]) -> User:
        for field, value in data.items():
            setattr(user, field, value)
        await self.session.flush()
        await self.session.refresh(user)
        return user
