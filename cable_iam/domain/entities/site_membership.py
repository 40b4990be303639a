"""
SiteMembership Entity

Links a User to a Site with a site role.
"""

from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlmodel import Field, SQLModel

from .enums import SiteRole


class SiteMembership(SQLModel, table=True):
    """
    SiteMembership entity - a user's role in one site.

    Business Rules:
    - (site_id, user_id) is unique; writes are upserts
    - site_role is independent per site
    - Only changed through the membership policy or invitation acceptance
    """

    __tablename__ = "site_memberships"

    id: Optional[int] = Field(default=None, primary_key=True)

    site_id: int = Field(
        sa_column=Column(
            Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True
        )
    )
    user_id: int = Field(
        sa_column=Column(
            Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
        )
    )

    site_role: SiteRole = Field(nullable=False)

    __table_args__ = (
        UniqueConstraint("site_id", "user_id", name="uq_site_membership_site_user"),
    )
