"""
Input Validation - bounds and format checks for ledger inputs.

Values mirror what the contract would accept as Solidity arguments:
- Amounts, prices and product codes are uint256
- Timestamps are uint64 seconds
- Identities are 20-byte hex addresses
"""

from typing import Any, Tuple

from gavel.crypto import is_valid_address

# =============================================================================
# Constants
# =============================================================================

MAX_UINT256 = 2**256 - 1
MAX_TIMESTAMP = 2**64 - 1

MIN_AMOUNT = 0
MAX_AMOUNT = MAX_UINT256
MIN_PRODUCT_CODE = 1


# =============================================================================
# Validation Functions
# =============================================================================


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        (is_valid, error_message)
    """
    # bool is an int subclass; True is not a price
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any, name: str = "amount") -> Tuple[bool, str]:
    """Validate a currency amount in the smallest unit."""
    return validate_integer(amount, name, MIN_AMOUNT, MAX_AMOUNT)


def validate_product_code(code: Any) -> Tuple[bool, str]:
    """Validate a product code (must be > 0)."""
    return validate_integer(code, "product_code", MIN_PRODUCT_CODE, MAX_UINT256)


def validate_timestamp(value: Any, name: str = "timestamp") -> Tuple[bool, str]:
    """Validate a Unix timestamp in seconds."""
    return validate_integer(value, name, 0, MAX_TIMESTAMP)


def validate_address(address: Any, name: str = "address") -> Tuple[bool, str]:
    """Validate an address string."""
    if not isinstance(address, str):
        return False, f"{name} must be str, got {type(address).__name__}"

    if not is_valid_address(address):
        return False, f"{name} is not a 0x-prefixed 20-byte hex address"

    return True, ""


# =============================================================================
# Composite Validators
# =============================================================================

SCRIPT_OPS = {
    "authorize": ("identity",),
    "set_auction_timing": ("start", "end"),
    "product": ("code", "price", "remove"),
    "bid": ("code", "amount"),
    "advance_time": ("timestamp",),
    "get_current_bids": ("code", "identity"),
    "get_highest_bid": ("code",),
    "get_winners": (),
}


def validate_script_step(step: Any) -> Tuple[bool, str]:
    """Validate one step of a replay script."""
    if not isinstance(step, dict):
        return False, "Step must be dict"

    op = step.get("op")
    if op not in SCRIPT_OPS:
        return False, f"Unknown op: {op!r}"

    for field in SCRIPT_OPS[op]:
        if field not in step:
            return False, f"Missing required field for {op}: {field}"

    if "caller" in step:
        valid, err = validate_address(step["caller"], "caller")
        if not valid:
            return False, err

    if op == "product" and not isinstance(step["remove"], bool):
        return False, f"remove must be true or false, got {step['remove']!r}"

    if op == "advance_time":
        valid, err = validate_timestamp(step["timestamp"], "timestamp")
        if not valid:
            return False, err

    return True, ""


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_integer",
    "validate_amount",
    "validate_product_code",
    "validate_timestamp",
    "validate_address",
    "validate_script_step",
    "SCRIPT_OPS",
    "MAX_UINT256",
    "MAX_TIMESTAMP",
]
