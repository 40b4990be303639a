from cable_iam.app.repositories.token_repository import ITokenRepository
from cable_iam.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ITokenRepository[PasswordResetToken]):
    """PasswordResetToken repository interface - application layer"""
