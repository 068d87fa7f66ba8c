"""Authentication utilities for the Palyrenet API."""

from app.auth.jwt import create_access_token, decode_token
from app.auth.password import hash_password, verify_password

__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
