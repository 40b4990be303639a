from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from cable_iam.api.error import raise_for_error
from cable_iam.app.services.password_hasher import IPasswordHasher
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.password_resets import (
    RedeemPasswordResetResponse,
    RedeemPasswordResetUseCase,
    ValidatePasswordResetResponse,
    ValidatePasswordResetTokenUseCase,
)
from cable_iam.depends import get_password_hasher, get_unit_of_work

router = APIRouter(prefix="/password-resets", tags=["Password Resets"])


class RedeemPasswordResetRequest(BaseModel):
    token: str = Field(..., description="Password reset token")
    new_password: str = Field(..., description="New password")


@router.get(
    "/validate/{token}",
    status_code=status.HTTP_200_OK,
    response_model=ValidatePasswordResetResponse,
)
async def validate_password_reset(token: str, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Validate Password Reset Token (public)

    Raises:
        - 400 Bad Request: INVALID_OR_EXPIRED
    """
    result = await ValidatePasswordResetTokenUseCase(uow).execute(token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/redeem",
    status_code=status.HTTP_200_OK,
    response_model=RedeemPasswordResetResponse,
)
async def redeem_password_reset(
    request: RedeemPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
):
    """
    Redeem Password Reset (public)

    Raises:
        - 400 Bad Request: VALIDATION_FAILED, INVALID_OR_EXPIRED
    """
    use_case = RedeemPasswordResetUseCase(uow, password_hasher)
    result = await use_case.execute(request.token, request.new_password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
