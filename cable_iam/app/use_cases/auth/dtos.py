"""
Authentication Use Case DTOs (Data Transfer Objects)

All Response classes for the auth domain.
Provides type safety and clear contracts between layers.
"""

from pydantic import BaseModel

from cable_iam.app.use_cases.users.dtos import UserInfo


# ============================================================================
# Response DTOs
# ============================================================================


class LoginResponse(BaseModel):
    """Response for user login use case"""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserInfo


class SetupAdminResponse(BaseModel):
    """Response for first-run setup use case"""

    status: str
    user: UserInfo
