"""
Business services for the token gateway.
"""

from .eth_client import EthereumClient, BlockInfo, ContractInfo
from .token_contract import TokenContract
from .transaction_sender import TransactionSender, SubmittedTransaction
from .user_service import UserService, claim_day
from .token_service import TokenService, TokenInfo, BalanceInfo
from .reward_service import RewardService, RewardStatus

__all__ = [
    "EthereumClient",
    "BlockInfo",
    "ContractInfo",
    "TokenContract",
    "TransactionSender",
    "SubmittedTransaction",
    "UserService",
    "claim_day",
    "TokenService",
    "TokenInfo",
    "BalanceInfo",
    "RewardService",
    "RewardStatus",
]
