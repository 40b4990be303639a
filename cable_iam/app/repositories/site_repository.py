from abc import ABC, abstractmethod
from typing import Iterable, Set


class ISiteRepository(ABC):
    """Read-only view of the site registry"""

    @abstractmethod
    async def get_existing_ids(self, site_ids: Iterable[int]) -> Set[int]:
        """Subset of site_ids that refer to existing sites"""
        pass
