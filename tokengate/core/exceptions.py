"""
Custom exception classes for the application.
Provides structured error handling across all modules.
"""

from typing import Any, Optional, Dict


class GatewayException(Exception):
    """Base exception class for the token gateway."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(GatewayException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFIGURATION_ERROR", details)


class DatabaseError(GatewayException):
    """Raised when there's a database error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "DATABASE_ERROR", details)


class BlockchainError(GatewayException):
    """Raised when an RPC call to the Ethereum node fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "BLOCKCHAIN_ERROR", details)


class ValidationError(GatewayException):
    """Raised when data validation fails."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class NotFoundError(GatewayException):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "NOT_FOUND", details)


class AuthenticationError(GatewayException):
    """Raised when authentication fails."""

    status_code = 401

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "AUTHENTICATION_ERROR", details)


# Account exceptions
class EmailAlreadyRegisteredError(GatewayException):
    """Raised when registering an email that already has an account."""

    status_code = 409

    def __init__(self, email: str):
        super().__init__(
            "Email is already registered",
            "EMAIL_ALREADY_REGISTERED",
            {"email": email}
        )


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not match an account."""

    def __init__(self):
        super().__init__("Invalid email or password")


class UserNotFoundError(NotFoundError):
    """Raised when a user is not found."""

    def __init__(self, user_id: int):
        super().__init__(
            f"User not found: {user_id}",
            {"user_id": user_id}
        )


class KeyDecryptionError(ValidationError):
    """Raised when a stored private key cannot be decrypted."""

    def __init__(self, message: str = "Wrong password or decryption failed"):
        super().__init__(message)


# Business logic exceptions
class ClaimAlreadySubmittedError(ValidationError):
    """Raised when today's reward claim was already submitted for a user."""

    def __init__(self, user_id: int, claim_day: int):
        super().__init__(
            "Today's claim was already submitted, wait for on-chain confirmation",
            {"user_id": user_id, "claim_day": claim_day}
        )


class InsufficientBalanceError(ValidationError):
    """Raised when a token balance is too low for a transfer."""

    def __init__(self, required: int, available: int):
        super().__init__(
            "Insufficient balance",
            {"required": str(required), "available": str(available)}
        )


class SelfTransferError(ValidationError):
    """Raised when a user tries to transfer tokens to their own address."""

    def __init__(self, address: str):
        super().__init__(
            "Cannot transfer to yourself",
            {"address": address}
        )
