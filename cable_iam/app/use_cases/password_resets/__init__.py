"""
Password Reset Use Cases
"""

from .create_password_reset_link_use_case import (
    DEFAULT_PASSWORD_RESET_TTL,
    CreatePasswordResetLinkUseCase,
)
from .dtos import (
    CreatePasswordResetLinkResponse,
    RedeemPasswordResetResponse,
    ValidatePasswordResetResponse,
)
from .redeem_password_reset_use_case import RedeemPasswordResetUseCase
from .validate_password_reset_token_use_case import ValidatePasswordResetTokenUseCase

__all__ = [
    "CreatePasswordResetLinkUseCase",
    "ValidatePasswordResetTokenUseCase",
    "RedeemPasswordResetUseCase",
    "DEFAULT_PASSWORD_RESET_TTL",
    "CreatePasswordResetLinkResponse",
    "ValidatePasswordResetResponse",
    "RedeemPasswordResetResponse",
]
