"""
Password Reset Use Case DTOs (Data Transfer Objects)
"""

from typing import Optional

from pydantic import BaseModel


class CreatePasswordResetLinkResponse(BaseModel):
    """Response for create password reset link use case"""

    user_id: int
    email: str
    reset_url: str
    expires_at: str
    email_sent: bool
    email_error: Optional[str] = None


class ValidatePasswordResetResponse(BaseModel):
    """Response for validate password reset token use case"""

    email: str
    username: str
    expires_at: str


class RedeemPasswordResetResponse(BaseModel):
    """Response for redeem password reset use case"""

    status: str
    message: str
