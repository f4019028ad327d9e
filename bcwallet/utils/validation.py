"""
Input Validation - sanitization for values crossing the wallet boundary.

Validates:
- Amounts and output indices reported by the ledger service
- Hex-encoded identifiers
- Wallet names (used as file names)
"""

import re
from typing import Any, Optional, Tuple

# =============================================================================
# Constants
# =============================================================================

MAX_WALLET_NAME_LENGTH = 64

# Amounts are plain integers, bounded like 8-byte unsigned values
MIN_AMOUNT = 1
MAX_AMOUNT = 2**63 - 1
MAX_OUTPUT_INDEX = 2**32 - 1

# Transaction ids are SHA-256 digests
TXID_SIZE = 32

WALLET_NAME_PATTERN = r"[A-Za-z0-9_\-][A-Za-z0-9_.\-]*"


# =============================================================================
# Validation Functions
# =============================================================================


def validate_bytes(
    data: Any,
    name: str,
    expected_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate bytes input.

    Args:
        data: Data to validate
        name: Field name for error messages
        expected_length: Exact expected length
        max_length: Maximum allowed length

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (bytes, bytearray)):
        return False, f"{name} must be bytes, got {type(data).__name__}"

    if expected_length is not None and len(data) != expected_length:
        return False, f"{name} must be {expected_length} bytes, got {len(data)}"

    if max_length is not None and len(data) > max_length:
        return False, f"{name} exceeds max length {max_length}, got {len(data)}"

    return True, ""


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Booleans are rejected even though they subclass int.

    Returns:
        (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any, name: str = "amount") -> Tuple[bool, str]:
    """Validate a strictly positive amount."""
    return validate_integer(amount, name, MIN_AMOUNT, MAX_AMOUNT)


def validate_output_index(index: Any) -> Tuple[bool, str]:
    """Validate an output index reported by the ledger service."""
    return validate_integer(index, "output_index", 0, MAX_OUTPUT_INDEX)


def validate_hex_string(value: Any, name: str, expected_bytes: Optional[int] = None) -> Tuple[bool, str]:
    """
    Validate a hex string (with or without 0x prefix).

    Args:
        value: Value to validate
        name: Field name
        expected_bytes: Expected byte length when decoded

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"

    hex_str = value[2:] if value.startswith("0x") else value

    if len(hex_str) == 0:
        return False, f"{name} is empty"

    if len(hex_str) % 2 != 0:
        return False, f"{name} has odd length, invalid hex"

    try:
        bytes.fromhex(hex_str)
    except ValueError:
        return False, f"{name} contains invalid hex characters"

    if expected_bytes is not None:
        actual_bytes = len(hex_str) // 2
        if actual_bytes != expected_bytes:
            return False, f"{name} must be {expected_bytes} bytes, got {actual_bytes}"

    return True, ""


def validate_wallet_name(value: Any) -> Tuple[bool, str]:
    """Validate a wallet name; it becomes a file name, so no separators."""
    if not isinstance(value, str):
        return False, f"wallet name must be str, got {type(value).__name__}"

    if not value:
        return False, "wallet name is empty"

    if len(value) > MAX_WALLET_NAME_LENGTH:
        return False, f"wallet name exceeds max length {MAX_WALLET_NAME_LENGTH}"

    if not re.fullmatch(WALLET_NAME_PATTERN, value):
        return False, "wallet name may only contain letters, digits, '_', '-' and '.'"

    return True, ""


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_bytes",
    "validate_integer",
    "validate_amount",
    "validate_output_index",
    "validate_hex_string",
    "validate_wallet_name",
    "MIN_AMOUNT",
    "MAX_AMOUNT",
    "TXID_SIZE",
]
