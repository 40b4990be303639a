"""
Token Vault

Issues and verifies opaque, single-use, expiring secrets. Invitations and
password resets both store their tokens through here; only the SHA-256
digest of a secret is ever persisted.
"""

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional, Tuple, TypeVar

from cable_iam.app.repositories.token_repository import ITokenRepository
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.domain.base import utcnow
from cable_iam.domain.entities import TokenPurpose
from cable_iam.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

TokenRecord = TypeVar("TokenRecord")

# 32 random bytes -> 256 bits of entropy
TOKEN_BYTES = 32

INVALID_OR_EXPIRED = Error("INVALID_OR_EXPIRED", "Invalid or expired token")


def generate_secret() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


def hash_token(secret: str) -> str:
    """Deterministic one-way digest used as the lookup key"""
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def is_token_dead(record, now: Optional[datetime] = None) -> bool:
    """A token is dead once used or once now reaches expires_at."""
    now = now or utcnow()
    return record.used_at is not None or now >= record.expires_at


class TokenVault:
    """
    Shared single-use token mechanism.

    Business Rules:
    - Secrets carry no business data; subject data lives on the record
    - Not found, expired and used collapse into INVALID_OR_EXPIRED
    - consume() is a conditional update, so concurrent redemptions of the
      same token consume it at most once
    - consume() runs inside the caller's unit of work; the gated side
      effect and the consumption commit together
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def _repository(self, purpose: TokenPurpose) -> ITokenRepository:
        if purpose == TokenPurpose.invite:
            return self.uow.invitations
        if purpose == TokenPurpose.reset:
            return self.uow.password_reset_tokens
        raise ValueError(f"Unknown token purpose: {purpose}")

    async def issue(
        self,
        purpose: TokenPurpose,
        record: TokenRecord,
        ttl: timedelta,
        now: Optional[datetime] = None,
    ) -> Tuple[str, TokenRecord]:
        """
        Attach a fresh secret to record and persist it.

        Args:
            purpose: Which token table the record belongs to
            record: Unsaved Invitation or PasswordResetToken carrying the payload
            ttl: Lifetime of the token
            now: Issue time (defaults to current UTC time)

        Returns:
            The plaintext secret (only ever returned here) and the stored record
        """
        now = now or utcnow()
        secret = generate_secret()
        record.token_hash = hash_token(secret)
        record.expires_at = now + ttl
        record.used_at = None
        stored = await self._repository(purpose).create(record)
        logger.info("Issued %s token id=%s expires_at=%s", purpose.value, stored.id, stored.expires_at)
        return secret, stored

    async def verify(
        self, purpose: TokenPurpose, secret: str, now: Optional[datetime] = None
    ) -> Result[TokenRecord]:
        """Return the live record behind secret, or INVALID_OR_EXPIRED."""
        if not secret:
            return Return.err(INVALID_OR_EXPIRED)

        digest = hash_token(secret)
        record = await self._repository(purpose).get_by_token_hash(digest)

        if record is None or not hmac.compare_digest(record.token_hash, digest):
            return Return.err(INVALID_OR_EXPIRED)

        if is_token_dead(record, now):
            return Return.err(INVALID_OR_EXPIRED)

        return Return.ok(record)

    async def consume(
        self, purpose: TokenPurpose, record: TokenRecord, now: Optional[datetime] = None
    ) -> Result[TokenRecord]:
        """Mark record used. Fails if another request consumed it first."""
        now = now or utcnow()
        consumed = await self._repository(purpose).mark_used(record.id, now)
        if not consumed:
            logger.warning("Lost race consuming %s token id=%s", purpose.value, record.id)
            return Return.err(INVALID_OR_EXPIRED)
        record.used_at = now
        return Return.ok(record)
