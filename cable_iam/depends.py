from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from cable_iam.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher
from cable_iam.adapter.services.smtp_mail_sender import NullMailSender, SmtpMailSender
from cable_iam.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from cable_iam.api.utils.jwt import verify_jwt
from cable_iam.app.services.mail_sender import IMailSender
from cable_iam.app.services.password_hasher import IPasswordHasher
from config import ApplicationConfig

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_password_hasher() -> IPasswordHasher:
    return BcryptPasswordHasher(rounds=ApplicationConfig.BCRYPT_ROUNDS)


def get_mail_sender() -> IMailSender:
    if not ApplicationConfig.SMTP_HOST or not ApplicationConfig.SMTP_FROM:
        return NullMailSender()
    return SmtpMailSender(
        host=ApplicationConfig.SMTP_HOST,
        port=ApplicationConfig.SMTP_PORT,
        from_address=ApplicationConfig.SMTP_FROM,
        user=ApplicationConfig.SMTP_USER,
        password=ApplicationConfig.SMTP_PASSWORD,
        use_tls=ApplicationConfig.SMTP_USE_TLS,
        timeout_seconds=ApplicationConfig.SMTP_TIMEOUT_SECONDS,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> int:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        ID of the authenticated user. Roles are not taken from the token.

    Raises:
        HTTPException: 401 if token is missing, invalid or expired
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_jwt(credentials.credentials)

    try:
        return int(payload["user_id"])
    except (TypeError, KeyError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
