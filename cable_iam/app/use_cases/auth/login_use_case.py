"""
Login Use Case

Handles user authentication and returns a JWT access token.
"""

import logging

from cable_iam.api.utils.jwt import generate_jwt
from cable_iam.app.services.password_hasher import IPasswordHasher
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.users.dtos import to_user_info
from cable_iam.domain.base import normalize_email
from cable_iam.libs.result import Error, Result, Return

from .dtos import LoginResponse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid email or password")


class LoginUseCase:
    """
    Use case for user login and JWT issuance.

    Business Rules:
    - Email lookup is case-insensitive
    - Password check costs the same whether or not the user exists
    - JWT identifies the user only; roles and scope are re-read per request
    """

    def __init__(self, uow: UnitOfWork, password_hasher: IPasswordHasher, expire_minutes: int):
        self.uow = uow
        self.password_hasher = password_hasher
        self.expire_minutes = expire_minutes

    async def execute(self, email: str, password: str) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Result with LoginResponse containing the access token, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(normalize_email(email))

            if user is None:
                # Burn a bcrypt round so unknown emails take as long as known ones
                self.password_hasher.hash(password)
                logger.warning("Login failed for unknown email")
                return Return.err(INVALID_CREDENTIALS)

            if not self.password_hasher.verify(password, user.password_hash):
                logger.warning("Login failed for user %s", user.id)
                return Return.err(INVALID_CREDENTIALS)

            memberships = await self.uow.memberships.get_by_user_id(user.id)

            access_token = generate_jwt(user.id, self.expire_minutes)

            return Return.ok(
                LoginResponse(
                    access_token=access_token,
                    expires_in=self.expire_minutes * 60,
                    user=to_user_info(user, memberships),
                )
            )
