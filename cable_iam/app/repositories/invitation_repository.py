from abc import abstractmethod
from datetime import datetime
from typing import List, Optional

from cable_iam.app.repositories.token_repository import ITokenRepository
from cable_iam.domain.entities import Invitation


class IInvitationRepository(ITokenRepository[Invitation]):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, invitation_id: int) -> Optional[Invitation]:
        """Get invitation by ID"""
        pass

    @abstractmethod
    async def get_pending_by_email(self, email: str, now: datetime) -> Optional[Invitation]:
        """Get the live (unused, unexpired) invitation for an email"""
        pass

    @abstractmethod
    async def delete_dead_by_email(self, email: str, now: datetime) -> int:
        """Remove unused invitations for an email that have already expired"""
        pass

    @abstractmethod
    async def list_pending(self, now: datetime) -> List[Invitation]:
        """All live invitations, newest first"""
        pass

    @abstractmethod
    async def delete(self, invitation_id: int) -> bool:
        """Hard delete an unused invitation and its site rows"""
        pass
