from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from cable_iam.app.services.membership_policy import SiteAssignment
from cable_iam.app.services.token_vault import hash_token
from cable_iam.app.use_cases.invitations import CreateInvitationUseCase
from cable_iam.domain.entities import GlobalRole, Invitation, SiteRole
from cable_iam.libs.result import Error, Return

from tests.unit.factories import make_user, membership, stub_directory

BASE_URL = "https://cables.example.com"


@pytest.fixture
def directory(mock_uow):
    users = [make_user(1, GlobalRole.GLOBAL_ADMIN), make_user(2), make_user(3)]
    memberships = [membership(2, 10, SiteRole.SITE_ADMIN), membership(3, 10)]
    stub_directory(mock_uow, users, memberships)

    async def existing(site_ids):
        return {s for s in site_ids if s in (10, 20)}

    async def persist(invitation):
        invitation.id = 42
        return invitation

    mock_uow.sites.get_existing_ids.side_effect = existing
    mock_uow.users.get_by_email.return_value = None
    mock_uow.invitations.get_pending_by_email.return_value = None
    mock_uow.invitations.create.side_effect = persist
    return mock_uow


def _use_case(uow, mail_sender):
    return CreateInvitationUseCase(uow, mail_sender, BASE_URL, ttl=timedelta(days=7))


@pytest.mark.asyncio
async def test_site_admin_invites_into_own_site(directory, mock_mail_sender):
    result = await _use_case(directory, mock_mail_sender).execute(
        2, " New@Example.com ", "New User", [SiteAssignment(10)]
    )

    assert result.is_ok()
    data = result.value
    assert data.id == 42
    assert data.email == "new@example.com"
    assert data.username == "newuser"
    assert data.invite_url == f"{BASE_URL}/auth/register?token={data.token}"
    assert [(s.site_id, s.site_role) for s in data.sites] == [(10, "SITE_USER")]
    assert data.email_sent is True

    stored: Invitation = directory.invitations.create.call_args.args[0]
    assert stored.token_hash == hash_token(data.token)
    assert stored.invited_by == 2
    directory.invitations.delete_dead_by_email.assert_awaited_once()
    directory.commit.assert_awaited_once()
    mock_mail_sender.send.assert_awaited_once()
    assert mock_mail_sender.send.call_args.args[0] == "new@example.com"


@pytest.mark.asyncio
async def test_global_admin_may_invite_without_sites(directory, mock_mail_sender):
    result = await _use_case(directory, mock_mail_sender).execute(1, "solo@example.com", "solo", [])

    assert result.is_ok()
    assert result.value.sites == []


@pytest.mark.asyncio
async def test_plain_user_cannot_invite(directory, mock_mail_sender):
    result = await _use_case(directory, mock_mail_sender).execute(
        3, "x@example.com", "x", [SiteAssignment(10)]
    )

    assert result.error.code == "UNAUTHORIZED"
    directory.invitations.create.assert_not_called()


@pytest.mark.asyncio
async def test_site_admin_cannot_invite_outside_scope(directory, mock_mail_sender):
    result = await _use_case(directory, mock_mail_sender).execute(
        2, "x@example.com", "x", [SiteAssignment(10), SiteAssignment(20)]
    )

    assert result.error.code == "OUT_OF_SCOPE"


@pytest.mark.asyncio
async def test_site_admin_cannot_send_siteless_invitation(directory, mock_mail_sender):
    result = await _use_case(directory, mock_mail_sender).execute(2, "x@example.com", "x", [])

    assert result.error.code == "OUT_OF_SCOPE"


@pytest.mark.asyncio
async def test_unknown_site(directory, mock_mail_sender):
    result = await _use_case(directory, mock_mail_sender).execute(
        1, "x@example.com", "x", [SiteAssignment(99)]
    )

    assert result.error.code == "SITE_NOT_FOUND"


@pytest.mark.asyncio
async def test_existing_user_email(directory, mock_mail_sender):
    directory.users.get_by_email.return_value = make_user(3)

    result = await _use_case(directory, mock_mail_sender).execute(
        1, "user3@example.com", "x", [SiteAssignment(10)]
    )

    assert result.error.code == "USER_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_pending_invitation_for_email(directory, mock_mail_sender):
    directory.invitations.get_pending_by_email.return_value = Invitation(
        id=5, email="x@example.com", username="x", invited_by=1, token_hash="h",
        expires_at=datetime(2099, 1, 1),
    )

    result = await _use_case(directory, mock_mail_sender).execute(
        1, "x@example.com", "x", [SiteAssignment(10)]
    )

    assert result.error.code == "INVITATION_ALREADY_PENDING"
    directory.invitations.create.assert_not_called()


@pytest.mark.asyncio
async def test_concurrent_insert_maps_to_pending_conflict(directory, mock_mail_sender):
    directory.invitations.create.side_effect = IntegrityError("insert", {}, Exception("unique"))

    result = await _use_case(directory, mock_mail_sender).execute(
        1, "x@example.com", "x", [SiteAssignment(10)]
    )

    assert result.error.code == "INVITATION_ALREADY_PENDING"
    directory.rollback.assert_awaited_once()
    mock_mail_sender.send.assert_not_called()


@pytest.mark.asyncio
async def test_mail_failure_still_returns_invitation(directory, mock_mail_sender):
    mock_mail_sender.send.return_value = Return.err(Error("EMAIL_NOT_CONFIGURED", "SMTP not configured"))

    result = await _use_case(directory, mock_mail_sender).execute(
        1, "x@example.com", "x", [SiteAssignment(10, SiteRole.SITE_ADMIN)]
    )

    assert result.is_ok()
    assert result.value.email_sent is False
    assert result.value.email_error == "SMTP not configured"
    directory.commit.assert_awaited_once()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email, username, sites",
    [
        ("not-an-email", "x", []),
        ("x@example.com", "   ", []),
        ("x@example.com", "x", [SiteAssignment(10), SiteAssignment(10)]),
    ],
)
async def test_validation_failures(directory, mock_mail_sender, email, username, sites):
    result = await _use_case(directory, mock_mail_sender).execute(1, email, username, sites)

    assert result.error.code == "VALIDATION_FAILED"
