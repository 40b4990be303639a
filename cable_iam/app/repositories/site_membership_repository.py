from abc import ABC, abstractmethod
from typing import Dict, Iterable, List

from cable_iam.domain.entities import SiteMembership, SiteRole


class ISiteMembershipRepository(ABC):
    """SiteMembership repository interface - application layer"""

    @abstractmethod
    async def get_by_user_id(self, user_id: int) -> List[SiteMembership]:
        """Get all memberships for a user"""
        pass

    @abstractmethod
    async def get_by_user_ids(
        self, user_ids: Iterable[int]
    ) -> Dict[int, List[SiteMembership]]:
        """Memberships grouped by user ID"""
        pass

    @abstractmethod
    async def upsert(self, site_id: int, user_id: int, site_role: SiteRole) -> None:
        """Insert the membership or update its role if it already exists"""
        pass

    @abstractmethod
    async def delete_for_sites(self, user_id: int, site_ids: Iterable[int]) -> int:
        """Remove a user's memberships in the given sites"""
        pass
