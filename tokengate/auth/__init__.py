"""
Authentication: password hashing, key wrapping and access tokens.
"""

from .crypto import (
    derive_key,
    hash_password,
    verify_password,
    encrypt_private_key,
    decrypt_private_key,
)
from .jwt import TokenClaims, create_access_token, decode_access_token

__all__ = [
    "derive_key",
    "hash_password",
    "verify_password",
    "encrypt_private_key",
    "decrypt_private_key",
    "TokenClaims",
    "create_access_token",
    "decode_access_token",
]
