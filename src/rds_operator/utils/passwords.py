"""Utilities for generating database credentials."""

from __future__ import annotations

import secrets
import string

DEFAULT_PASSWORD_LENGTH = 20

# RDS rejects '/', '@', '"' and spaces in master passwords
PASSWORD_CHARACTERS = string.ascii_letters + string.digits


def generate_password(length: int = DEFAULT_PASSWORD_LENGTH) -> str:
    """Generate a random master password."""
    if length <= 0:
        raise ValueError("password length must be positive")
    return "".join(secrets.choice(PASSWORD_CHARACTERS) for _ in range(length))
