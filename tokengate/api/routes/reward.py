"""
Daily reward routes for the QXB API.
"""

from typing import Optional

from fastapi import APIRouter, Depends

import structlog

from tokengate.api.dependencies import get_optional_user, get_reward_reader, get_reward_service
from tokengate.api.schemas.common import create_success_response
from tokengate.api.schemas.reward import ClaimRequest, RewardStatusData, RewardStatusResponse
from tokengate.api.schemas.token import TxSubmittedData, TxSubmittedResponse
from tokengate.auth.jwt import TokenClaims
from tokengate.core.exceptions import ValidationError
from tokengate.services.reward_service import RewardService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get(
    "/status/{address}",
    response_model=RewardStatusResponse,
    summary="Get Daily Reward Status",
)
async def get_reward_status(
    address: str,
    service: RewardService = Depends(get_reward_reader),
):
    status = await service.get_status(address)
    return create_success_response(
        data=RewardStatusData(
            address=status.address,
            can_claim=status.can_claim,
            last_claim_day=status.last_claim_day,
            next_claim_day=status.next_claim_day,
        )
    )


@router.post(
    "/claim",
    response_model=TxSubmittedResponse,
    summary="Claim Daily Reward",
    description=(
        "Authenticated users claim with their password; otherwise a raw "
        "private key must be supplied"
    ),
)
async def claim_daily_reward(
    request: ClaimRequest,
    user: Optional[TokenClaims] = Depends(get_optional_user),
    service: RewardService = Depends(get_reward_service),
):
    if user is not None and request.password:
        tx = await service.claim_with_password(user.user_id, request.password)
    elif request.private_key:
        tx = await service.claim_with_private_key(request.private_key)
    else:
        raise ValidationError("Provide a password (when logged in) or a private key")

    return create_success_response(data=TxSubmittedData(tx_hash=tx.tx_hash, status=tx.status))
