"""
Input validation and unit formatting helpers.
"""

import string
from decimal import Decimal, ROUND_HALF_EVEN, localcontext
from typing import Union

from eth_utils import is_hex_address

from tokengate.core.exceptions import ValidationError

SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def is_valid_address(address: str) -> bool:
    """Check for a 40-hex-digit address, 0x prefix optional (checksum not enforced)."""
    return isinstance(address, str) and is_hex_address(address)


def normalize_private_key(value: str) -> str:
    """
    Validate a hex private key, with or without 0x prefix.

    Returns the key as 64 lowercase hex characters.
    """
    key = value.strip()
    if key[:2].lower() == "0x":
        key = key[2:]

    if len(key) != 64:
        raise ValidationError("Invalid private key")

    if not all(c in string.hexdigits for c in key):
        raise ValidationError("Invalid private key")

    if not 0 < int(key, 16) < SECP256K1_ORDER:
        raise ValidationError("Invalid private key")

    return key.lower()


def parse_amount(value: str) -> int:
    """Parse a positive base-10 integer amount of token base units."""
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        raise ValidationError("Invalid amount", {"amount": value})

    amount = int(text)
    if amount <= 0:
        raise ValidationError("Amount must be positive", {"amount": value})
    return amount


def format_units(value: Union[int, Decimal], decimals: int, places: int = 6) -> str:
    """Format a base-unit integer as a fixed-point decimal string."""
    with localcontext() as ctx:
        # uint256 needs 78 significant digits
        ctx.prec = 100
        scaled = Decimal(value).scaleb(-decimals)
        quantum = Decimal(1).scaleb(-places)
        return str(scaled.quantize(quantum, rounding=ROUND_HALF_EVEN))
