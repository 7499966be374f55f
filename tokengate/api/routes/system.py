"""
Contract-level content and plain-text API documentation.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from tokengate.api.dependencies import get_token_reader
from tokengate.api.schemas.common import create_success_response
from tokengate.api.schemas.token import ResumeData, ResumeResponse
from tokengate.services.token_service import TokenService

router = APIRouter()


API_DOCS = """QXB Token Gateway API

All JSON responses use the envelope {"success": bool, "data": ..., "error": "..."}.
Authenticated routes expect the header: Authorization: Bearer <token>

GET  /health
    Service health.

GET  /api/token/info
    Token name, symbol, decimals, totalSupply and version.

GET  /api/token/balance/{address}
    Token balance of an address, formatted with six decimal places.

GET  /api/resume
    Markdown resume stored in the contract.

GET  /api/reward/status/{address}
    Daily reward eligibility: canClaim, lastClaimDay, nextClaimDay.

POST /api/reward/claim                 (optional auth)
    Body: {"password": "..."} when logged in, or {"privateKey": "0x..."}.
    Response: {"txHash": "0x...", "status": "pending"}

POST /api/auth/register
    Body: {"email": "...", "password": "..."}
    Response: {"user_id", "email", "address", "token"}

POST /api/auth/login
    Body: {"email": "...", "password": "..."}
    Response: {"user_id", "email", "address", "token"}

GET  /api/auth/me                      (auth required)
    Response: {"user_id", "email", "address"}

POST /api/token/transfer               (auth required)
    Body: {"to": "0x...", "amount": "<base units>", "password": "..."}
    Response: {"txHash": "0x...", "status": "pending"}
"""


@router.get("/docs", response_class=PlainTextResponse, summary="API Documentation")
async def api_docs():
    return API_DOCS


@router.get("/resume", response_model=ResumeResponse, summary="Get Resume")
async def get_resume(service: TokenService = Depends(get_token_reader)):
    return create_success_response(data=ResumeData(resume=await service.get_resume()))
