from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Shield
from app.repositories.base import OrderableRepository


class ShieldRepository(OrderableRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Shield)

    async def get_main(self) -> Optional[Shield]:
        result = await self.session.execute(select(Shield).where(Shield.is_main_shield.is_(True)).limit(1))
        return result.scalar_one_or_none()

    async def clear_main(self, except_id: Optional[str] = None) -> None:
        """Unset is_main_shield on every other row, in the caller's transaction."""
        stmt = update(Shield).where(Shield.is_main_shield.is_(True))
        if except_id is not None:
            stmt = stmt.where(Shield.id != except_id)
        await self.session.execute(stmt.values(is_main_shield=False))
