"""
Database models for the token gateway.

Only off-chain account data lives here; token state is always read from the
contract.
"""

from .base import Base, BaseModel, TimestampMixin
from .user import User
from .claim_lock import ClaimLock

__all__ = [
    "Base",
    "BaseModel",
    "TimestampMixin",
    "User",
    "ClaimLock",
]
