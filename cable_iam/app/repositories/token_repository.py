from abc import ABC, abstractmethod
from datetime import datetime
from typing import Generic, Optional, TypeVar

TokenRecord = TypeVar("TokenRecord")


class ITokenRepository(ABC, Generic[TokenRecord]):
    """Storage contract shared by every single-use token table"""

    @abstractmethod
    async def create(self, record: TokenRecord) -> TokenRecord:
        """Persist a freshly issued token record"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[TokenRecord]:
        """Exact-match lookup by token digest"""
        pass

    @abstractmethod
    async def mark_used(self, record_id: int, used_at: datetime) -> bool:
        """
        Set used_at only if the record is still unused and unexpired.

        Returns True when this call consumed the token.
        """
        pass
