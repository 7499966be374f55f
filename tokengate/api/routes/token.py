"""
Token routes for the QXB API.
Handles token metadata, balances and custodial transfers.
"""

from fastapi import APIRouter, Depends

import structlog

from tokengate.api.dependencies import get_current_user, get_token_reader, get_token_service
from tokengate.api.schemas.common import create_success_response
from tokengate.api.schemas.token import (
    BalanceData,
    BalanceResponse,
    TokenInfoData,
    TokenInfoResponse,
    TransferRequest,
    TxSubmittedData,
    TxSubmittedResponse,
)
from tokengate.auth.jwt import TokenClaims
from tokengate.services.token_service import TokenService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get(
    "/info",
    response_model=TokenInfoResponse,
    response_model_exclude_none=True,
    summary="Get Token Info",
    description="Token name, symbol, decimals, total supply and contract version",
)
async def get_token_info(service: TokenService = Depends(get_token_reader)):
    info = await service.get_token_info()
    return create_success_response(
        data=TokenInfoData(
            name=info.name,
            symbol=info.symbol,
            decimals=info.decimals,
            total_supply=info.total_supply,
            version=info.version,
        )
    )


@router.get(
    "/balance/{address}",
    response_model=BalanceResponse,
    summary="Get Token Balance",
)
async def get_token_balance(
    address: str,
    service: TokenService = Depends(get_token_reader),
):
    balance = await service.get_balance(address)
    return create_success_response(
        data=BalanceData(address=balance.address, balance=balance.balance, symbol=balance.symbol)
    )


@router.post(
    "/transfer",
    response_model=TxSubmittedResponse,
    summary="Transfer Tokens",
    description="Send tokens from the authenticated user's custodial address",
)
async def transfer_tokens(
    request: TransferRequest,
    user: TokenClaims = Depends(get_current_user),
    service: TokenService = Depends(get_token_service),
):
    tx = await service.transfer(user.user_id, request.to, request.amount, request.password)
    logger.info("Transfer request accepted", user_id=user.user_id, tx_hash=tx.tx_hash)
    return create_success_response(data=TxSubmittedData(tx_hash=tx.tx_hash, status=tx.status))
