"""
User password helpers.
"""

from __future__ import annotations

import secrets

import bcrypt

# Generated passwords are short and easy to read out to field staff.
PASSWORD_ALPHABET = "bcdfghjklmnpqrstvwxyz"
GENERATED_PASSWORD_LENGTH = 6


class PasswordError(ValueError):
    pass


def generate_password(length: int = GENERATED_PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise PasswordError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False
