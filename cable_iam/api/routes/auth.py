from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from cable_iam.api.error import raise_for_error
from cable_iam.app.services.password_hasher import IPasswordHasher
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.auth import (
    LoginResponse,
    LoginUseCase,
    SetupAdminResponse,
    SetupAdminUseCase,
)
from cable_iam.depends import get_password_hasher, get_unit_of_work
from config import ApplicationConfig

router = APIRouter(tags=["Authentication"])


class LoginRequest(BaseModel):
    """Login HTTP request payload"""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class SetupAdminRequest(BaseModel):
    """
    First-run setup HTTP request payload

    Password strength is checked by the use case so the response carries
    the specific missing requirements.
    """

    email: EmailStr = Field(..., description="Admin email address")
    username: str = Field(..., min_length=1, max_length=255, description="Admin username")
    password: str = Field(..., description="Admin password")


@router.post("/setup", status_code=status.HTTP_201_CREATED, response_model=SetupAdminResponse)
async def setup_admin(
    request: SetupAdminRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
):
    """
    First-run Setup

    Creates the first global admin. Only works while no user exists.

    Raises:
        - 400 Bad Request: VALIDATION_FAILED
        - 409 Conflict: SETUP_ALREADY_COMPLETED
    """
    use_case = SetupAdminUseCase(uow, password_hasher)
    result = await use_case.execute(request.email, request.username, request.password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post("/auth/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(
    request: LoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
):
    """
    User Login

    Returns a bearer access token. The token identifies the user only;
    roles and site scope are re-read on every request.

    Raises:
        - 401 Unauthorized: INVALID_CREDENTIALS
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    use_case = LoginUseCase(uow, password_hasher, ApplicationConfig.JWT_EXPIRE_MINUTES)
    result = await use_case.execute(request.email, request.password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
