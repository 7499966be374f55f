"""
Custodial user model: login credentials plus the password-encrypted signing key.
"""

from sqlalchemy import BigInteger, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, TimestampMixin


class User(BaseModel, TimestampMixin):
    """Registered user with a server-generated Ethereum account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="Login email",
    )

    address: Mapped[str] = mapped_column(
        String(42),
        nullable=False,
        comment="Checksummed address of the custodial key",
    )

    # All key material is standard base64
    enc_priv_key: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="AES-GCM nonce || ciphertext of the private key",
    )

    enc_salt: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="argon2id salt for the key-encryption key",
    )

    pass_salt: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="argon2id salt for the password hash",
    )

    password_hash: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        comment="argon2id password hash",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, address={self.address})>"
