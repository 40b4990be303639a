from collections import defaultdict
from typing import Dict, Iterable, List

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from cable_iam.app.repositories.site_membership_repository import ISiteMembershipRepository
from cable_iam.domain.entities import SiteMembership, SiteRole


class SiteMembershipRepository(ISiteMembershipRepository):
    """SiteMembership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: int) -> List[SiteMembership]:
        """Get all memberships for a user"""
        stmt = (
            select(SiteMembership)
            .where(SiteMembership.user_id == user_id)
            .order_by(SiteMembership.site_id)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_by_user_ids(
        self, user_ids: Iterable[int]
    ) -> Dict[int, List[SiteMembership]]:
        user_ids = list(user_ids)
        grouped: Dict[int, List[SiteMembership]] = defaultdict(list)
        if not user_ids:
            return grouped
        stmt = (
            select(SiteMembership)
            .where(SiteMembership.user_id.in_(user_ids))
            .order_by(SiteMembership.user_id, SiteMembership.site_id)
        )
        result = await self.session.exec(stmt)
        for membership in result.all():
            grouped[membership.user_id].append(membership)
        return grouped

    async def upsert(self, site_id: int, user_id: int, site_role: SiteRole) -> None:
        """Insert or update the (site_id, user_id) membership"""
        stmt = select(SiteMembership).where(
            SiteMembership.site_id == site_id, SiteMembership.user_id == user_id
        )
        result = await self.session.exec(stmt)
        membership = result.one_or_none()
        if membership is None:
            membership = SiteMembership(site_id=site_id, user_id=user_id, site_role=site_role)
        else:
            membership.site_role = site_role
        self.session.add(membership)
        await self.session.flush()

    async def delete_for_sites(self, user_id: int, site_ids: Iterable[int]) -> int:
        site_ids = list(site_ids)
        if not site_ids:
            return 0
        result = await self.session.execute(
            delete(SiteMembership).where(
                SiteMembership.user_id == user_id, SiteMembership.site_id.in_(site_ids)
            )
        )
        await self.session.flush()
        return result.rowcount
