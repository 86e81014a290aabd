from __future__ import annotations

import re
from typing import Dict, Optional

MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72

_EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email.strip()))


def password_error(password: str, field: str = "Password") -> Optional[str]:
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"{field} must be at least {MIN_PASSWORD_LENGTH} characters"
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return f"{field} cannot exceed {MAX_PASSWORD_BYTES} bytes"
    return None


def name_error(name: str) -> Optional[str]:
    if not name.strip():
        return "Name is required"
    return None


def validate_registration(name: Optional[str], email: Optional[str], password: Optional[str]) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    if not name or not name.strip():
        errors["name"] = "Name is required"
    else:
        err = name_error(name)
        if err:
            errors["name"] = err

    if not email or not email.strip():
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Please enter a valid email"

    if not password:
        errors["password"] = "Password is required"
    else:
        err = password_error(password)
        if err:
            errors["password"] = err

    return errors


def validate_login(email: Optional[str], password: Optional[str]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not email or not email.strip():
        errors["email"] = "Email is required"
    if not password:
        errors["password"] = "Password is required"
    return errors


def validate_profile_patch(
    name: Optional[str],
    email: Optional[str],
    current_password: Optional[str],
    new_password: Optional[str],
) -> Dict[str, str]:
    """Field checks for a profile update. Only supplied fields are looked at."""
    errors: Dict[str, str] = {}

    if name is not None and name != "":
        err = name_error(name)
        if err:
            errors["name"] = err

    if email:
        if not is_valid_email(email):
            errors["email"] = "Please enter a valid email"

    if new_password and not current_password:
        errors["currentPassword"] = "Current password is required to set a new password"
    elif current_password and not new_password:
        errors["newPassword"] = "New password is required"
    elif new_password:
        err = password_error(new_password, field="New password")
        if err:
            errors["newPassword"] = err

    return errors
