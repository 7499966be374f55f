"""
Account routes: registration, login and the current user.
"""

from fastapi import APIRouter, Depends

import structlog

from tokengate.api.dependencies import get_current_user, get_user_service
from tokengate.api.schemas.auth import AuthData, AuthResponse, CredentialsRequest, UserData, UserResponse
from tokengate.api.schemas.common import create_success_response
from tokengate.auth.jwt import TokenClaims, create_access_token
from tokengate.core.exceptions import ValidationError
from tokengate.services.user_service import UserService

logger = structlog.get_logger(__name__)

router = APIRouter()


def _require_credentials(request: CredentialsRequest) -> None:
    if not request.email.strip() or not request.password:
        raise ValidationError("Email and password are required")


@router.post(
    "/register",
    response_model=AuthResponse,
    summary="Register",
    description="Create an account with a new custodial address",
)
async def register(
    request: CredentialsRequest,
    users: UserService = Depends(get_user_service),
):
    _require_credentials(request)
    user = await users.register(request.email, request.password)
    token = create_access_token(user.id, user.email)
    return create_success_response(
        data=AuthData(user_id=user.id, email=user.email, address=user.address, token=token)
    )


@router.post("/login", response_model=AuthResponse, summary="Login")
async def login(
    request: CredentialsRequest,
    users: UserService = Depends(get_user_service),
):
    _require_credentials(request)
    user = await users.authenticate(request.email, request.password)
    token = create_access_token(user.id, user.email)
    logger.info("User logged in", user_id=user.id)
    return create_success_response(
        data=AuthData(user_id=user.id, email=user.email, address=user.address, token=token)
    )


@router.get("/me", response_model=UserResponse, summary="Current User")
async def me(
    claims: TokenClaims = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    user = await users.get_by_id(claims.user_id)
    return create_success_response(
        data=UserData(user_id=user.id, email=user.email, address=user.address)
    )
