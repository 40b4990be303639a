from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from config import ApplicationConfig


def generate_jwt(user_id: int, expire_minutes: Optional[int] = None) -> str:
    """
    Generate JWT access token

    Args:
        user_id: User ID
        expire_minutes: Lifetime in minutes (defaults to JWT_EXPIRE_MINUTES)

    Returns:
        JWT token string (HS256)
    """
    if expire_minutes is None:
        expire_minutes = ApplicationConfig.JWT_EXPIRE_MINUTES
    now = datetime.now(UTC)
    payload = {
        "user_id": str(user_id),
        "exp": now + timedelta(minutes=expire_minutes),
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"])
        return payload
    except JWTError:
        return None
