from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from cable_iam.app.repositories.invitation_repository import IInvitationRepository
from cable_iam.domain.entities import Invitation, InvitationSite


class InvitationRepository(IInvitationRepository):
    """Invitation repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, invitation_id: int) -> Optional[Invitation]:
        """Get invitation by ID"""
        stmt = select(Invitation).where(Invitation.id == invitation_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_token_hash(self, token_hash: str) -> Optional[Invitation]:
        """Get invitation by token digest"""
        stmt = select(Invitation).where(Invitation.token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_pending_by_email(self, email: str, now: datetime) -> Optional[Invitation]:
        """Get the live invitation for an email"""
        stmt = select(Invitation).where(
            Invitation.email == email,
            Invitation.used_at.is_(None),
            Invitation.expires_at > now,
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def delete_dead_by_email(self, email: str, now: datetime) -> int:
        """Remove expired, never-used invitations for an email"""
        stmt = select(Invitation.id).where(
            Invitation.email == email,
            Invitation.used_at.is_(None),
            Invitation.expires_at <= now,
        )
        result = await self.session.exec(stmt)
        dead_ids = list(result.all())
        if not dead_ids:
            return 0
        await self.session.execute(
            delete(InvitationSite).where(InvitationSite.invitation_id.in_(dead_ids))
        )
        await self.session.execute(delete(Invitation).where(Invitation.id.in_(dead_ids)))
        await self.session.flush()
        return len(dead_ids)

    async def list_pending(self, now: datetime) -> List[Invitation]:
        """All live invitations, newest first"""
        stmt = (
            select(Invitation)
            .where(Invitation.used_at.is_(None), Invitation.expires_at > now)
            .order_by(Invitation.created_at.desc(), Invitation.id.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation together with its site rows"""
        self.session.add(invitation)
        await self.session.flush()
        return invitation

    async def mark_used(self, record_id: int, used_at: datetime) -> bool:
        """Consume the invitation if nobody else has"""
        stmt = (
            update(Invitation)
            .where(
                Invitation.id == record_id,
                Invitation.used_at.is_(None),
                Invitation.expires_at > used_at,
            )
            .values(used_at=used_at)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def delete(self, invitation_id: int) -> bool:
        """Hard delete an unused invitation"""
        await self.session.execute(
            delete(InvitationSite).where(InvitationSite.invitation_id == invitation_id)
        )
        result = await self.session.execute(
            delete(Invitation).where(
                Invitation.id == invitation_id, Invitation.used_at.is_(None)
            )
        )
        await self.session.flush()
        return result.rowcount > 0
