"""
Invitation Entity

Pending account invitations, optionally scoped to one or more sites.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, text
from sqlmodel import Field, Index, Relationship, SQLModel

from ..base import utcnow
from .enums import SiteRole


class InvitationSite(SQLModel, table=True):
    """A site (and role in it) granted when the invitation is accepted."""

    __tablename__ = "invitation_sites"

    invitation_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("invitations.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    site_id: int = Field(
        sa_column=Column(
            Integer, ForeignKey("sites.id", ondelete="CASCADE"), primary_key=True
        )
    )
    site_role: SiteRole = Field(default=SiteRole.SITE_USER, nullable=False)
    position: int = Field(default=0)

    invitation: Optional["Invitation"] = Relationship(back_populates="sites")


class Invitation(SQLModel, table=True):
    """
    Invitation entity - an offer to create an account.

    Business Rules:
    - Created by a global admin or a site admin for sites they administer
    - Expires after INVITATION_TTL_HOURS (7 days by default)
    - Token is single-use; only its SHA-256 digest is stored
    - At most one pending (unused) invitation per email
    - Expired is derived from expires_at, never written
    """

    __tablename__ = "invitations"

    id: Optional[int] = Field(default=None, primary_key=True)

    email: str = Field(max_length=255, nullable=False, index=True)
    username: str = Field(max_length=255, nullable=False)
    token_hash: str = Field(unique=True, index=True, max_length=64)

    invited_by: int = Field(
        sa_column=Column(
            Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
        )
    )

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    sites: List[InvitationSite] = Relationship(
        back_populates="invitation",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "InvitationSite.position",
            "lazy": "selectin",
        },
    )

    __table_args__ = (
        Index("idx_invitation_expires_at", "expires_at"),
        Index(
            "uq_invitation_pending_email",
            "email",
            unique=True,
            sqlite_where=text("used_at IS NULL"),
            postgresql_where=text("used_at IS NULL"),
        ),
    )

    @property
    def site_ids(self) -> set[int]:
        return {s.site_id for s in self.sites}
