"""
Access Control Domain Enums

Roles are two independent axes: a global role per user and a site role
per (site, user) membership. There is deliberately no combined ranking.
"""

from enum import Enum


class GlobalRole(str, Enum):
    """Installation-wide role"""

    GLOBAL_ADMIN = "GLOBAL_ADMIN"
    USER = "USER"


class SiteRole(str, Enum):
    """Role within a single site"""

    SITE_ADMIN = "SITE_ADMIN"
    SITE_USER = "SITE_USER"


class TokenPurpose(str, Enum):
    """What a single-use token gates"""

    invite = "invite"
    reset = "reset"
