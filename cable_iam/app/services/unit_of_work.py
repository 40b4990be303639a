from abc import ABC, abstractmethod

from cable_iam.app.repositories.invitation_repository import IInvitationRepository
from cable_iam.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from cable_iam.app.repositories.site_membership_repository import ISiteMembershipRepository
from cable_iam.app.repositories.site_repository import ISiteRepository
from cable_iam.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    sites: ISiteRepository
    memberships: ISiteMembershipRepository
    invitations: IInvitationRepository
    password_reset_tokens: IPasswordResetTokenRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
