"""
Authentication Use Cases

Login and first-run setup.
"""

from .dtos import LoginResponse, SetupAdminResponse
from .login_use_case import LoginUseCase
from .setup_admin_use_case import SetupAdminUseCase

__all__ = [
    # Use Cases
    "LoginUseCase",
    "SetupAdminUseCase",
    # DTOs - Responses
    "LoginResponse",
    "SetupAdminResponse",
]
