from typing import Iterable, List, Optional

from sqlalchemy import delete, func, or_
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from cable_iam.app.repositories.user_repository import IUserRepository
from cable_iam.domain.entities import (
    Invitation,
    InvitationSite,
    PasswordResetToken,
    SiteMembership,
    User,
)


def _search_clause(search: str):
    term = search.strip().lower()
    term = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{term}%"
    return or_(
        func.lower(User.email).like(pattern, escape="\\"),
        func.lower(User.username).like(pattern, escape="\\"),
    )


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list_all(self, search: Optional[str] = None) -> List[User]:
        stmt = select(User)
        if search:
            stmt = stmt.where(_search_clause(search))
        stmt = stmt.order_by(User.created_at.desc(), User.id.desc())
        result = await self.session.exec(stmt)
        return list(result.all())

    async def list_by_site_ids(
        self, site_ids: Iterable[int], search: Optional[str] = None
    ) -> List[User]:
        site_ids = list(site_ids)
        if not site_ids:
            return []
        member_ids = select(SiteMembership.user_id).where(
            SiteMembership.site_id.in_(site_ids)
        )
        stmt = select(User).where(User.id.in_(member_ids))
        if search:
            stmt = stmt.where(_search_clause(search))
        stmt = stmt.order_by(User.created_at.desc(), User.id.desc())
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count(self) -> int:
        result = await self.session.exec(select(func.count()).select_from(User))
        return result.one()

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Update existing user"""
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def delete(self, user_id: int) -> bool:
        """Delete a user and cascade to memberships, tokens and sent invitations"""
        sent = select(Invitation.id).where(Invitation.invited_by == user_id)
        await self.session.execute(
            delete(InvitationSite).where(InvitationSite.invitation_id.in_(sent))
        )
        await self.session.execute(delete(Invitation).where(Invitation.invited_by == user_id))
        await self.session.execute(
            delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id)
        )
        await self.session.execute(
            update(PasswordResetToken)
            .where(PasswordResetToken.created_by_user_id == user_id)
            .values(created_by_user_id=None)
        )
        await self.session.execute(delete(SiteMembership).where(SiteMembership.user_id == user_id))
        result = await self.session.execute(delete(User).where(User.id == user_id))
        await self.session.flush()
        return result.rowcount > 0
