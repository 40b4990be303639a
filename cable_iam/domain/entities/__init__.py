"""
Access Control Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    GlobalRole,
    SiteRole,
    TokenPurpose,
)

# Export all entities
from .user import User
from .site import Site
from .site_membership import SiteMembership
from .invitation import Invitation, InvitationSite
from .password_reset_token import PasswordResetToken

__all__ = [
    # Enums
    "GlobalRole",
    "SiteRole",
    "TokenPurpose",
    # Entities
    "User",
    "Site",
    "SiteMembership",
    "Invitation",
    "InvitationSite",
    "PasswordResetToken",
]
