"""
User Entity

Represents a person who can hold memberships in many sites.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, SQLModel

from ..base import utcnow
from .enums import GlobalRole


class User(SQLModel, table=True):
    """
    User entity - an account that can sign in.

    Business Rules:
    - Email is unique and stored lower-cased (case-insensitive identity)
    - Username is normalized (trimmed, lower-cased, no whitespace)
    - Password stored as bcrypt hash
    - global_role is independent of any per-site role
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    username: str = Field(max_length=255)
    password_hash: str = Field(max_length=255)

    global_role: GlobalRole = Field(default=GlobalRole.USER)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    @property
    def is_global_admin(self) -> bool:
        return self.global_role == GlobalRole.GLOBAL_ADMIN
