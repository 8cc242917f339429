"""
Input Validation - sanitization for externally supplied arguments.

Engine operations accept raw addresses and amounts from callers.
These helpers reject malformed values before any state is touched:
- Wrong-length or non-bytes addresses
- The zero address where a real account is required
- Negative or oversized (> uint256) amounts
"""

from typing import Any, Optional, Tuple

# =============================================================================
# Constants
# =============================================================================

ADDRESS_SIZE = 20
ZERO_ACCOUNT = bytes(ADDRESS_SIZE)

MIN_AMOUNT = 0
MAX_AMOUNT = 2**256 - 1
MIN_TIMESTAMP = 0
MAX_TIMESTAMP = 2**64 - 1


# =============================================================================
# Validation Functions
# =============================================================================


def validate_bytes(data: Any, name: str, expected_length: Optional[int] = None) -> Tuple[bool, str]:
    """
    Validate bytes input.

    Args:
        data: Data to validate
        name: Field name for error messages
        expected_length: Exact expected length

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (bytes, bytearray)):
        return False, f"{name} must be bytes, got {type(data).__name__}"

    if expected_length is not None and len(data) != expected_length:
        return False, f"{name} must be {expected_length} bytes, got {len(data)}"

    return True, ""


def validate_address(address: Any, name: str = "address") -> Tuple[bool, str]:
    """Validate a 20-byte address."""
    return validate_bytes(address, name, expected_length=ADDRESS_SIZE)


def validate_account(address: Any, name: str = "account") -> Tuple[bool, str]:
    """Validate a 20-byte address that is not the zero address."""
    valid, err = validate_address(address, name)
    if valid and bytes(address) == ZERO_ACCOUNT:
        return False, f"{name} must not be the zero address"
    return valid, err


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
    # bool is an int subclass but never a meaningful amount
    if not isinstance(value, int) or isinstance(value, bool):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any, name: str = "amount") -> Tuple[bool, str]:
    """Validate a token amount (uint256)."""
    return validate_integer(amount, name, MIN_AMOUNT, MAX_AMOUNT)


def validate_timestamp(timestamp: Any) -> Tuple[bool, str]:
    """Validate a unix timestamp in seconds."""
    return validate_integer(timestamp, "timestamp", MIN_TIMESTAMP, MAX_TIMESTAMP)


# =============================================================================
# Raising Helpers
# =============================================================================


def require_address(address: Any, name: str = "address") -> bytes:
    """Return the address as bytes or raise ValueError."""
    valid, err = validate_address(address, name)
    if not valid:
        raise ValueError(err)
    return bytes(address)


def require_account(address: Any, name: str = "account") -> bytes:
    """Like require_address, but the zero address is rejected too."""
    valid, err = validate_account(address, name)
    if not valid:
        raise ValueError(err)
    return bytes(address)


def require_amount(amount: Any, name: str = "amount") -> int:
    """Return the amount or raise ValueError."""
    valid, err = validate_amount(amount, name)
    if not valid:
        raise ValueError(err)
    return amount


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_bytes",
    "validate_address",
    "validate_account",
    "validate_integer",
    "validate_amount",
    "validate_timestamp",
    "require_address",
    "require_account",
    "require_amount",
    "ADDRESS_SIZE",
    "MAX_AMOUNT",
]
