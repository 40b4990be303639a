from sqlmodel.ext.asyncio.session import AsyncSession

from cable_iam.adapter.repositories.invitation_repository import InvitationRepository
from cable_iam.adapter.repositories.password_reset_token_repository import PasswordResetTokenRepository
from cable_iam.adapter.repositories.site_membership_repository import SiteMembershipRepository
from cable_iam.adapter.repositories.site_repository import SiteRepository
from cable_iam.adapter.repositories.user_repository import UserRepository
from cable_iam.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.sites = SiteRepository(self.session)
        self.memberships = SiteMembershipRepository(self.session)
        self.invitations = InvitationRepository(self.session)
        self.password_reset_tokens = PasswordResetTokenRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Anything not committed by the use case is discarded
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
