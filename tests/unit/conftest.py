from unittest.mock import AsyncMock, MagicMock

import pytest

from cable_iam.libs.result import Return


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Every repository method is awaited
    uow.users = AsyncMock()
    uow.sites = AsyncMock()
    uow.memberships = AsyncMock()
    uow.invitations = AsyncMock()
    uow.password_reset_tokens = AsyncMock()
    return uow


@pytest.fixture
def mock_hasher():
    hasher = MagicMock()
    hasher.hash.side_effect = lambda secret: f"hashed:{secret}"
    hasher.verify.side_effect = lambda secret, digest: digest == f"hashed:{secret}"
    return hasher


@pytest.fixture
def mock_mail_sender():
    sender = MagicMock()
    sender.send = AsyncMock(return_value=Return.ok(None))
    return sender
