"""
Test input validation and unit formatting.
"""

import pytest

from tokengate.core.exceptions import ValidationError
from tokengate.utils.validation import format_units, is_valid_address, normalize_private_key, parse_amount

from conftest import RAW_KEY


@pytest.mark.parametrize("address", [
    "0x70997970C51812dc3A010C7d01b50e0d17dc79C8",
    "0x70997970c51812dc3a010c7d01b50e0d17dc79c8",
    "70997970C51812dc3A010C7d01b50e0d17dc79C8",
])
def test_valid_addresses(address):
    assert is_valid_address(address)


@pytest.mark.parametrize("address", [
    "",
    "0x123",
    "70997970C51812dc3A010C7d01b50e0d17dc79C",
    "0x70997970C51812dc3A010C7d01b50e0d17dc79CZ",
    "0x70997970C51812dc3A010C7d01b50e0d17dc79C8aa",
])
def test_invalid_addresses(address):
    assert not is_valid_address(address)


def test_normalize_private_key_accepts_optional_prefix():
    assert normalize_private_key(RAW_KEY) == RAW_KEY
    assert normalize_private_key("0x" + RAW_KEY.upper()) == RAW_KEY


@pytest.mark.parametrize("value", [
    "",
    "0x1234",
    "zz" * 32,
    "0" * 64,
    "f" * 64,
])
def test_normalize_private_key_rejects_invalid(value):
    with pytest.raises(ValidationError):
        normalize_private_key(value)


def test_parse_amount():
    assert parse_amount("1") == 1
    assert parse_amount(" 1000000000000000000 ") == 10**18


@pytest.mark.parametrize("value", ["", "0", "-5", "1.5", "1e18", "abc"])
def test_parse_amount_rejects_invalid(value):
    with pytest.raises(ValidationError):
        parse_amount(value)


def test_format_units():
    assert format_units(0, 18) == "0.000000"
    assert format_units(1500 * 10**18, 18) == "1500.000000"
    assert format_units(1, 18) == "0.000000"
    assert format_units(123456789, 6) == "123.456789"
    assert format_units(10**18 + 5 * 10**13, 18, 4) == "1.0000"


def test_format_units_handles_uint256_max():
    value = 2**256 - 1
    formatted = format_units(value, 18)

    assert formatted.startswith(str(value // 10**18) + ".")
    assert len(formatted.split(".")[1]) == 6
