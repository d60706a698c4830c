from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import GalleryCategory, GalleryItem
from app.repositories.base import OrderableRepository


class GalleryItemRepository(OrderableRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, GalleryItem)

    async def list_by_category(self, category_id: str) -> List[GalleryItem]:
        return await self.list(GalleryItem.category_id == category_id)

    async def list_uncategorized(self) -> List[GalleryItem]:
        return await self.list(GalleryItem.category_id.is_(None))

    async def delete_by_category(self, category_id: str) -> int:
        result = await self.session.execute(
            delete(GalleryItem).where(GalleryItem.category_id == category_id)
        )
        return result.rowcount or 0


class GalleryCategoryRepository(OrderableRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, GalleryCategory)

    async def get_by_slug(self, slug: str) -> Optional[GalleryCategory]:
        result = await self.session.execute(select(GalleryCategory).where(GalleryCategory.slug == slug))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[GalleryCategory]:
        result = await self.session.execute(select(GalleryCategory).where(GalleryCategory.name == name))
        return result.scalar_one_or_none()
