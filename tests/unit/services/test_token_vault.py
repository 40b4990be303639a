from datetime import datetime, timedelta

import pytest

from cable_iam.app.services.token_vault import (
    INVALID_OR_EXPIRED,
    TokenVault,
    generate_secret,
    hash_token,
    is_token_dead,
)
from cable_iam.domain.entities import Invitation, PasswordResetToken, TokenPurpose

NOW = datetime(2024, 6, 1, 12, 0, 0)


async def _persist(record):
    record.id = 7
    return record


def test_generate_secret_is_url_safe_and_unique():
    secrets = {generate_secret() for _ in range(50)}
    assert len(secrets) == 50
    for secret in secrets:
        assert len(secret) >= 43
        assert all(c.isalnum() or c in "-_" for c in secret)


def test_hash_token_is_deterministic_sha256_hex():
    digest = hash_token("abc")
    assert digest == hash_token("abc")
    assert digest != hash_token("abd")
    assert len(digest) == 64


def test_token_is_dead_at_exact_expiry():
    record = PasswordResetToken(user_id=1, token_hash="x", expires_at=NOW)
    assert is_token_dead(record, NOW - timedelta(seconds=1)) is False
    assert is_token_dead(record, NOW) is True


def test_used_token_is_dead_before_expiry():
    record = PasswordResetToken(
        user_id=1, token_hash="x", expires_at=NOW + timedelta(hours=1), used_at=NOW
    )
    assert is_token_dead(record, NOW) is True


@pytest.mark.asyncio
async def test_issue_stores_only_digest(mock_uow):
    mock_uow.invitations.create.side_effect = _persist
    invitation = Invitation(email="a@example.com", username="a", invited_by=1)

    secret, stored = await TokenVault(mock_uow).issue(
        TokenPurpose.invite, invitation, timedelta(days=7), now=NOW
    )

    assert stored.id == 7
    assert stored.token_hash == hash_token(secret)
    assert stored.token_hash != secret
    assert stored.expires_at == NOW + timedelta(days=7)
    assert stored.used_at is None
    mock_uow.password_reset_tokens.create.assert_not_called()


@pytest.mark.asyncio
async def test_issue_routes_reset_tokens_to_their_repository(mock_uow):
    mock_uow.password_reset_tokens.create.side_effect = _persist

    await TokenVault(mock_uow).issue(
        TokenPurpose.reset, PasswordResetToken(user_id=3), timedelta(hours=1), now=NOW
    )

    mock_uow.password_reset_tokens.create.assert_awaited_once()
    mock_uow.invitations.create.assert_not_called()


@pytest.mark.asyncio
async def test_verify_returns_live_record(mock_uow):
    secret = generate_secret()
    record = PasswordResetToken(
        id=1, user_id=3, token_hash=hash_token(secret), expires_at=NOW + timedelta(minutes=5)
    )
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = record

    result = await TokenVault(mock_uow).verify(TokenPurpose.reset, secret, now=NOW)

    assert result.is_ok()
    assert result.value is record
    mock_uow.password_reset_tokens.get_by_token_hash.assert_awaited_once_with(hash_token(secret))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "expires_in, used_at",
    [
        (timedelta(0), None),  # exactly at expiry
        (timedelta(hours=-1), None),
        (timedelta(hours=1), NOW - timedelta(minutes=1)),
    ],
)
async def test_verify_collapses_dead_tokens(mock_uow, expires_in, used_at):
    secret = generate_secret()
    mock_uow.invitations.get_by_token_hash.return_value = Invitation(
        id=1,
        email="a@example.com",
        username="a",
        invited_by=1,
        token_hash=hash_token(secret),
        expires_at=NOW + expires_in,
        used_at=used_at,
    )

    result = await TokenVault(mock_uow).verify(TokenPurpose.invite, secret, now=NOW)

    assert result.is_err()
    assert result.error == INVALID_OR_EXPIRED


@pytest.mark.asyncio
async def test_verify_unknown_and_empty_tokens(mock_uow):
    mock_uow.invitations.get_by_token_hash.return_value = None
    vault = TokenVault(mock_uow)

    unknown = await vault.verify(TokenPurpose.invite, "nope", now=NOW)
    empty = await vault.verify(TokenPurpose.invite, "", now=NOW)

    assert unknown.error.code == "INVALID_OR_EXPIRED"
    assert empty.error.code == "INVALID_OR_EXPIRED"


@pytest.mark.asyncio
async def test_consume_marks_record_used(mock_uow):
    mock_uow.password_reset_tokens.mark_used.return_value = True
    record = PasswordResetToken(id=4, user_id=3, token_hash="x", expires_at=NOW + timedelta(hours=1))

    result = await TokenVault(mock_uow).consume(TokenPurpose.reset, record, now=NOW)

    assert result.is_ok()
    assert record.used_at == NOW
    mock_uow.password_reset_tokens.mark_used.assert_awaited_once_with(4, NOW)


@pytest.mark.asyncio
async def test_consume_fails_when_already_consumed(mock_uow):
    mock_uow.password_reset_tokens.mark_used.return_value = False
    record = PasswordResetToken(id=4, user_id=3, token_hash="x", expires_at=NOW + timedelta(hours=1))

    result = await TokenVault(mock_uow).consume(TokenPurpose.reset, record, now=NOW)

    assert result.is_err()
    assert result.error.code == "INVALID_OR_EXPIRED"
    assert record.used_at is None
