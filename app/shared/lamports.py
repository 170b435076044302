"""
Lamport amounts: parsing at the API boundary and display helpers
"""
from decimal import Decimal
from typing import Annotated, Any

from pydantic import PlainSerializer

LAMPORTS_PER_SOL = 1_000_000_000

# Largest integer a JSON number can carry without losing precision in a browser
MAX_SAFE_INTEGER = 2**53 - 1
# Column range (signed 64-bit)
MAX_LAMPORTS = 2**63 - 1


def parse_lamports(value: Any) -> int:
    """
    Normalize a lamport amount from a request body to an int.

    Decimal strings are the preferred transport. Plain JSON numbers are accepted
    only up to MAX_SAFE_INTEGER; bigger amounts have to be sent as strings.
    Raises ValueError for anything that is not a positive integer in range.
    """
    if isinstance(value, bool):
        raise ValueError("amount must be an integer number of lamports")

    if isinstance(value, str):
        text = value.strip()
        if not text.isdigit() or not text.isascii():
            raise ValueError("amount must be a string of decimal digits")
        amount = int(text)
    elif isinstance(value, int):
        if abs(value) > MAX_SAFE_INTEGER:
            raise ValueError("amounts above 2^53 - 1 must be sent as decimal strings")
        amount = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValueError("amount must be an integer number of lamports")
        if abs(value) > MAX_SAFE_INTEGER:
            raise ValueError("amounts above 2^53 - 1 must be sent as decimal strings")
        amount = int(value)
    else:
        raise ValueError("amount must be a decimal string or an integer")

    if amount <= 0:
        raise ValueError("amount must be greater than zero")
    if amount > MAX_LAMPORTS:
        raise ValueError("amount exceeds the supported range")
    return amount


def format_sol(lamports: int) -> str:
    """Render lamports as SOL with two decimals, e.g. 500000000 -> '0.50'."""
    return f"{Decimal(lamports) / LAMPORTS_PER_SOL:.2f}"


# Lamports leave the API as decimal strings
LamportsStr = Annotated[int, PlainSerializer(str, return_type=str, when_used="always")]
