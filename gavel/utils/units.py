"""
Currency unit conversion.

Amounts on the ledger are integers in the smallest unit (wei-like). These
helpers convert human-readable decimal strings such as "0.99" into that
unit and back, without going through floats.
"""

from decimal import Decimal, InvalidOperation
from typing import Union

ETHER_DECIMALS = 18


def parse_units(value: Union[str, int, Decimal], decimals: int = ETHER_DECIMALS) -> int:
    """
    Convert a decimal amount into integer smallest units.

    Args:
        value: Decimal string, int or Decimal (floats are rejected)
        decimals: Number of fractional digits of the unit

    Returns:
        Integer amount

    Raises:
        ValueError: malformed value, negative value, or more fractional
            digits than the unit supports
    """
    if isinstance(value, float):
        raise ValueError("Use a string or Decimal, not float")
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError):
        raise ValueError(f"Invalid amount: {value!r}") from None

    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {value}")

    scaled = amount.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Too many decimal places for {decimals} decimals: {value}")
    return int(scaled)


def format_units(amount: int, decimals: int = ETHER_DECIMALS) -> str:
    """Render an integer amount as a decimal string ("2.0", "0.99")."""
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")
    whole, frac = divmod(amount, 10**decimals)
    if frac == 0 or decimals == 0:
        return f"{whole}.0" if decimals else str(whole)
    frac_str = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{frac_str}"


def parse_ether(value: Union[str, int, Decimal]) -> int:
    """parse_units with 18 decimals."""
    return parse_units(value, ETHER_DECIMALS)


def format_ether(amount: int) -> str:
    """format_units with 18 decimals."""
    return format_units(amount, ETHER_DECIMALS)
