import pytest
from jose import jwt

from cable_iam.app.use_cases.auth import LoginUseCase, SetupAdminUseCase
from cable_iam.domain.entities import GlobalRole, User
from config import ApplicationConfig

from tests.unit.factories import make_user


@pytest.mark.asyncio
async def test_login_returns_token_with_user_id_only(mock_uow, mock_hasher):
    mock_uow.users.get_by_email.return_value = make_user(7)
    mock_uow.memberships.get_by_user_id.return_value = []

    result = await LoginUseCase(mock_uow, mock_hasher, 60).execute("User7@Example.com", "OldPass1!")

    assert result.is_ok()
    mock_uow.users.get_by_email.assert_awaited_once_with("user7@example.com")
    claims = jwt.decode(result.value.access_token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"])
    assert claims["user_id"] == "7"
    assert "role" not in claims
    assert result.value.expires_in == 3600
    assert result.value.user.id == 7


@pytest.mark.asyncio
async def test_login_wrong_password(mock_uow, mock_hasher):
    mock_uow.users.get_by_email.return_value = make_user(7)

    result = await LoginUseCase(mock_uow, mock_hasher, 60).execute("user7@example.com", "nope")

    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_unknown_email_still_hashes(mock_uow, mock_hasher):
    mock_uow.users.get_by_email.return_value = None

    result = await LoginUseCase(mock_uow, mock_hasher, 60).execute("ghost@example.com", "Whatever1!")

    assert result.error.code == "INVALID_CREDENTIALS"
    mock_hasher.hash.assert_called_once()


@pytest.mark.asyncio
async def test_setup_creates_first_global_admin(mock_uow, mock_hasher):
    mock_uow.users.count.return_value = 0

    async def create(user: User):
        user.id = 1
        return user

    mock_uow.users.create.side_effect = create

    result = await SetupAdminUseCase(mock_uow, mock_hasher).execute(
        "Admin@Example.com", "Admin", "Str0ng!Pass"
    )

    assert result.value.user.global_role == GlobalRole.GLOBAL_ADMIN.value
    assert result.value.user.email == "admin@example.com"
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_setup_only_once(mock_uow, mock_hasher):
    mock_uow.users.count.return_value = 1

    result = await SetupAdminUseCase(mock_uow, mock_hasher).execute(
        "admin@example.com", "admin", "Str0ng!Pass"
    )

    assert result.error.code == "SETUP_ALREADY_COMPLETED"
    mock_uow.users.create.assert_not_called()
