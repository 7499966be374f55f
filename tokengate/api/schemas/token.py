"""
Token schemas. Field names on the wire are camelCase.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .common import RequestBody, SuccessResponse


class TokenInfoData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    symbol: str
    decimals: int
    total_supply: str = Field(alias="totalSupply", description="Formatted with six decimal places")
    version: Optional[str] = None


class TokenInfoResponse(SuccessResponse):
    data: TokenInfoData


class BalanceData(BaseModel):
    address: str
    balance: str = Field(description="Formatted with six decimal places")
    symbol: str


class BalanceResponse(SuccessResponse):
    data: BalanceData


class TransferRequest(RequestBody):
    """Custodial token transfer. Amount is in base units."""
    to: str = ""
    amount: str = ""
    password: str = ""


class TxSubmittedData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tx_hash: str = Field(alias="txHash")
    status: str = "pending"


class TxSubmittedResponse(SuccessResponse):
    data: TxSubmittedData


class ResumeData(BaseModel):
    resume: str


class ResumeResponse(SuccessResponse):
    data: ResumeData
