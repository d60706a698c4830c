"""
Generic repository for content tables ordered by display_order.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Type

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError

logger = logging.getLogger(__name__)


class OrderableRepository:
    """
    Data access for one model that has id and display_order columns.

    Writes are flushed, not committed; the calling service owns the
    transaction so it can order commits before storage side effects.
    """

    def __init__(self, session: AsyncSession, model: Type[Any]):
        self.session = session
        self.model = model

    def _ordered(self, *criteria):
        stmt = select(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        order_by = [self.model.display_order.asc()]
        if hasattr(self.model, "created_at"):
            order_by.append(self.model.created_at.asc())
        return stmt.order_by(*order_by)

    async def list(self, *criteria) -> List[Any]:
        result = await self.session.execute(self._ordered(*criteria))
        return list(result.scalars().all())

    async def get(self, entity_id: str) -> Optional[Any]:
        result = await self.session.execute(select(self.model).where(self.model.id == entity_id))
        return result.scalar_one_or_none()

    async def next_display_order(self) -> int:
        result = await self.session.execute(select(func.max(self.model.display_order)))
        max_order = result.scalar()
        return 0 if max_order is None else max_order + 1

    async def flush(self, refresh: Iterable[Any] = ()) -> None:
        """
        Flush pending changes and reload server-generated columns.

        Raises:
            ConflictError: If a unique constraint is violated
        """
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"Integrity error on {self.model.__tablename__}: {str(e.orig)}")
            raise ConflictError(
                f"Conflicting {self.model.__tablename__} record",
                details=str(e.orig),
            )
        for obj in refresh:
            await self.session.refresh(obj)

    async def create(self, data: Dict[str, Any]) -> Any:
        if data.get("display_order") is None:
            data["display_order"] = await self.next_display_order()
        obj = self.model(**data)
        self.session.add(obj)
        await self.flush(refresh=[obj])
        return obj

    async def update(self, obj: Any, data: Dict[str, Any]) -> Any:
        for field, value in data.items():
            setattr(obj, field, value)
        await self.flush(refresh=[obj])
        return obj

    async def delete(self, obj: Any) -> None:
        await self.session.delete(obj)
        await self.flush()

    async def reorder(self, items: List[Any]) -> int:
        """
        Apply each (id, display_order) pair as its own UPDATE.
        Unknown ids match no row and are skipped.

        Returns:
            int: Number of rows updated
        """
        updated = 0
        for item in items:
            result = await self.session.execute(
                update(self.model)
                .where(self.model.id == item.id)
                .values(display_order=item.display_order)
            )
            updated += result.rowcount or 0
        return updated
