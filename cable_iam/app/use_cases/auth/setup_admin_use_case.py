"""
Setup Admin Use Case

First-run bootstrap of the initial global admin.
"""

import logging

from sqlalchemy.exc import IntegrityError

from cable_iam.app.services.password_hasher import IPasswordHasher
from cable_iam.app.services.password_policy import validate_password
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.users.dtos import to_user_info
from cable_iam.domain.base import normalize_email, normalize_username
from cable_iam.domain.entities import GlobalRole, User
from cable_iam.libs.result import Error, Result, Return

from .dtos import SetupAdminResponse

logger = logging.getLogger(__name__)

SETUP_ALREADY_COMPLETED = Error("SETUP_ALREADY_COMPLETED", "Setup has already been completed")


class SetupAdminUseCase:
    """
    Use case for creating the first GLOBAL_ADMIN.

    Business Rules:
    - Only allowed while no user exists
    - Password must satisfy the password policy
    """

    def __init__(self, uow: UnitOfWork, password_hasher: IPasswordHasher):
        self.uow = uow
        self.password_hasher = password_hasher

    async def execute(self, email: str, username: str, password: str) -> Result[SetupAdminResponse]:
        email = normalize_email(email)
        username = normalize_username(username)
        if not email or "@" not in email:
            return Return.err(Error("VALIDATION_FAILED", "A valid email is required"))
        if not username:
            return Return.err(Error("VALIDATION_FAILED", "Username is required"))

        password_validation = validate_password(password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            if await self.uow.users.count() > 0:
                return Return.err(SETUP_ALREADY_COMPLETED)

            try:
                user = await self.uow.users.create(
                    User(
                        email=email,
                        username=username,
                        password_hash=self.password_hasher.hash(password),
                        global_role=GlobalRole.GLOBAL_ADMIN,
                    )
                )
                await self.uow.commit()
            except IntegrityError:
                await self.uow.rollback()
                return Return.err(SETUP_ALREADY_COMPLETED)

            logger.info("Initial global admin %s created", user.id)
            return Return.ok(SetupAdminResponse(status="created", user=to_user_info(user)))
