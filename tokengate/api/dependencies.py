"""
API dependencies for FastAPI endpoints.
Provides database sessions, service wiring and bearer-token authentication.
"""

from typing import Optional
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

import structlog

from tokengate.auth.jwt import TokenClaims, decode_access_token
from tokengate.core.config import settings
from tokengate.core.database import get_db_session
from tokengate.core.exceptions import AuthenticationError, ConfigurationError
from tokengate.services.eth_client import EthereumClient
from tokengate.services.reward_service import RewardService
from tokengate.services.token_contract import TokenContract
from tokengate.services.token_service import TokenService
from tokengate.services.transaction_sender import TransactionSender
from tokengate.services.user_service import UserService


logger = structlog.get_logger(__name__)


# ============================================================================
# SERVICES
# ============================================================================

def get_eth_client(request: Request) -> EthereumClient:
    """RPC client created in the application lifespan."""
    client = getattr(request.app.state, "eth_client", None)
    if client is None:
        raise ConfigurationError("Ethereum client is not initialized")
    return client


def get_token_contract(client: EthereumClient = Depends(get_eth_client)) -> TokenContract:
    return TokenContract(client, settings.contract_address)


def get_transaction_sender(client: EthereumClient = Depends(get_eth_client)) -> TransactionSender:
    return TransactionSender(client)


def get_user_service(db: AsyncSession = Depends(get_db_session)) -> UserService:
    return UserService(db)


def get_token_reader(contract: TokenContract = Depends(get_token_contract)) -> TokenService:
    """Token service for read-only endpoints (no database session)."""
    return TokenService(contract)


def get_token_service(
    contract: TokenContract = Depends(get_token_contract),
    sender: TransactionSender = Depends(get_transaction_sender),
    users: UserService = Depends(get_user_service),
) -> TokenService:
    return TokenService(contract, sender, users)


def get_reward_reader(contract: TokenContract = Depends(get_token_contract)) -> RewardService:
    return RewardService(contract)


def get_reward_service(
    contract: TokenContract = Depends(get_token_contract),
    sender: TransactionSender = Depends(get_transaction_sender),
    users: UserService = Depends(get_user_service),
) -> RewardService:
    return RewardService(contract, sender, users)


# ============================================================================
# AUTHENTICATION
# ============================================================================

def parse_bearer_token(authorization: str) -> str:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise AuthenticationError("Invalid authorization format")
    return parts[1]


async def get_current_user(
    authorization: Optional[str] = Header(default=None),
) -> TokenClaims:
    """Require a valid bearer token."""
    if not authorization:
        raise AuthenticationError("Missing authentication token")

    token = parse_bearer_token(authorization)
    try:
        return decode_access_token(token)
    except AuthenticationError as e:
        logger.info("Rejected access token", reason=e.message)
        raise AuthenticationError("Invalid or expired token")


async def get_optional_user(
    authorization: Optional[str] = Header(default=None),
) -> Optional[TokenClaims]:
    """Identify the caller when a valid bearer token is present, else None."""
    if not authorization:
        return None

    try:
        return decode_access_token(parse_bearer_token(authorization))
    except AuthenticationError:
        return None
