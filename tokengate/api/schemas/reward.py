"""
Daily reward schemas.
"""

from pydantic import BaseModel, ConfigDict, Field

from .common import RequestBody, SuccessResponse


class RewardStatusData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address: str
    can_claim: bool = Field(alias="canClaim")
    last_claim_day: int = Field(alias="lastClaimDay")
    next_claim_day: int = Field(alias="nextClaimDay")


class RewardStatusResponse(SuccessResponse):
    data: RewardStatusData


class ClaimRequest(RequestBody):
    """Either a password (custodial, authenticated) or a raw private key."""

    private_key: str = Field(default="", alias="privateKey")
    password: str = ""
