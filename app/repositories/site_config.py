from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import SiteConfig


class SiteConfigRepository:
    """The site_config table holds a single row."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_config(self) -> Optional[SiteConfig]:
        result = await self.session.execute(select(SiteConfig).limit(1))
        return result.scalar_one_or_none()

    async def create_config(self, data: Dict[str, Any]) -> SiteConfig:
        config = SiteConfig(**data)
        self.session.add(config)
        await self.session.flush()
        await self.session.refresh(config)
        return config

    async def update_config(self, config: SiteConfig, data: Dict[str, Any]) -> SiteConfig:
        for field, value in data.items():
            setattr(config, field, value)
        await self.session.flush()
        await self.session.refresh(config)
        return config
