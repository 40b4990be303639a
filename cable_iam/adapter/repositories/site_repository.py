from typing import Iterable, Set

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from cable_iam.app.repositories.site_repository import ISiteRepository
from cable_iam.domain.entities import Site


class SiteRepository(ISiteRepository):
    """Site registry lookups using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_existing_ids(self, site_ids: Iterable[int]) -> Set[int]:
        site_ids = set(site_ids)
        if not site_ids:
            return set()
        result = await self.session.exec(select(Site.id).where(Site.id.in_(site_ids)))
        return set(result.all())
