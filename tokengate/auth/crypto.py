"""
Password hashing and private-key wrapping.

Both use argon2id with the same cost parameters. The password hash and the
key-encryption key are derived with independent salts, so the stored hash never
reveals the wrapping key.

Wrapped keys are stored as base64(nonce || AES-256-GCM ciphertext).
"""

import base64
import binascii
import hmac
import secrets
from typing import Tuple

from argon2.low_level import Type, hash_secret_raw
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from tokengate.core.exceptions import KeyDecryptionError

ARGON2_TIME_COST = 1
ARGON2_MEMORY_COST = 64 * 1024  # KiB
ARGON2_PARALLELISM = 1
ARGON2_HASH_LEN = 32

SALT_SIZE = 16
NONCE_SIZE = 12


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(value: str) -> bytes:
    return base64.b64decode(value, validate=True)


def derive_key(password: str, salt: bytes) -> bytes:
    """Derive a 32-byte key from a password with argon2id."""
    return hash_secret_raw(
        secret=password.encode("utf-8"),
        salt=salt,
        time_cost=ARGON2_TIME_COST,
        memory_cost=ARGON2_MEMORY_COST,
        parallelism=ARGON2_PARALLELISM,
        hash_len=ARGON2_HASH_LEN,
        type=Type.ID,
    )


def hash_password(password: str) -> Tuple[str, str]:
    """Hash a password with a fresh salt. Returns (hash_b64, salt_b64)."""
    salt = secrets.token_bytes(SALT_SIZE)
    return _b64encode(derive_key(password, salt)), _b64encode(salt)


def verify_password(password: str, hash_b64: str, salt_b64: str) -> bool:
    """Check a password against a stored hash in constant time."""
    try:
        salt = _b64decode(salt_b64)
        expected = _b64decode(hash_b64)
    except (binascii.Error, ValueError):
        return False

    return hmac.compare_digest(derive_key(password, salt), expected)


def encrypt_private_key(password: str, plaintext: bytes) -> Tuple[str, str]:
    """
    Encrypt key material under a password-derived key.

    Returns (cipher_b64, salt_b64) where the ciphertext carries its nonce as
    a 12-byte prefix.
    """
    salt = secrets.token_bytes(SALT_SIZE)
    nonce = secrets.token_bytes(NONCE_SIZE)
    cipher = AESGCM(derive_key(password, salt))
    ciphertext = cipher.encrypt(nonce, plaintext, None)
    return _b64encode(nonce + ciphertext), _b64encode(salt)


def decrypt_private_key(password: str, cipher_b64: str, salt_b64: str) -> bytes:
    """Decrypt key material; a wrong password fails GCM authentication."""
    try:
        salt = _b64decode(salt_b64)
        data = _b64decode(cipher_b64)
    except (binascii.Error, ValueError) as e:
        raise KeyDecryptionError("Stored key is not valid base64") from e

    if len(data) < NONCE_SIZE:
        raise KeyDecryptionError("Ciphertext too short")

    nonce, ciphertext = data[:NONCE_SIZE], data[NONCE_SIZE:]
    cipher = AESGCM(derive_key(password, salt))
    try:
        return cipher.decrypt(nonce, ciphertext, None)
    except InvalidTag as e:
        raise KeyDecryptionError() from e
