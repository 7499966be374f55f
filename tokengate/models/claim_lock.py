"""
Per-user, per-day marker for submitted daily reward claims.
"""

from sqlalchemy import BigInteger, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel, TimestampMixin


class ClaimLock(BaseModel, TimestampMixin):
    """A row exists while (or after) a user's claim for that UTC day is in flight."""

    __tablename__ = "claim_locks"

    user_id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=False,
    )

    claim_day: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
        comment="Whole UTC days since the Unix epoch",
    )

    def __repr__(self) -> str:
        return f"<ClaimLock(user_id={self.user_id}, claim_day={self.claim_day})>"
