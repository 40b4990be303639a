from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from cable_iam.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by (normalized) email address"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def list_all(self, search: Optional[str] = None) -> List[User]:
        """All users, newest first, optionally filtered by email/username"""
        pass

    @abstractmethod
    async def list_by_site_ids(
        self, site_ids: Iterable[int], search: Optional[str] = None
    ) -> List[User]:
        """Users holding at least one membership in the given sites"""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Total number of users"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass

    @abstractmethod
    async def delete(self, user_id: int) -> bool:
        """Delete a user together with everything that references it"""
        pass
