import re

from cable_iam.libs.result import Error, Result, Return

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 72  # bcrypt ignores bytes beyond this


def validate_password(password: str) -> Result[None]:
    """
    Validate password complexity.

    Requires at least 8 characters, an uppercase letter, a digit and a
    character that is neither alphanumeric nor whitespace.
    """
    problems = []
    if password is None or len(password) < MIN_PASSWORD_LENGTH:
        problems.append(f"at least {MIN_PASSWORD_LENGTH} characters")
        password = password or ""
    if len(password.encode("utf-8")) > MAX_PASSWORD_LENGTH:
        problems.append(f"at most {MAX_PASSWORD_LENGTH} bytes")
    if not re.search(r"[A-Z]", password):
        problems.append("an uppercase letter")
    if not re.search(r"\d", password):
        problems.append("a number")
    if not re.search(r"[^A-Za-z0-9\s]", password):
        problems.append("a special character")

    if problems:
        return Return.err(
            Error("VALIDATION_FAILED", "Password must contain " + ", ".join(problems))
        )
    return Return.ok(None)
