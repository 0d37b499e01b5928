"""Shared type definitions for pool models.

Identities (owner, callers and the two assets) are 0x-prefixed 20-byte
hex strings, compared in lowercase form.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field, PlainSerializer


def validate_amount(value: Any) -> int:
    """Validate that a value is a non-negative integer amount.

    Accepts ints and decimal strings, so snapshots round-trip through JSON.

    Raises:
        ValueError: If value is not a non-negative integer
    """
    if isinstance(value, bool):
        raise ValueError("Amount must be an integer, got bool")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"Amount must be a decimal integer string: '{value}'") from err
    if not isinstance(value, int):
        raise ValueError(f"Amount must be string or int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Amount cannot be negative: {value}")
    return value


def validate_address(value: Any) -> str:
    """Pydantic validator: normalize and validate an identity."""
    if not isinstance(value, str):
        raise ValueError(f"Address must be a string, got {type(value).__name__}")
    return normalize_address(value, validate=True)


# Identity of an account or asset (lowercase, 0x + 40 hex chars)
Address = Annotated[str, BeforeValidator(validate_address)]

# Non-negative arbitrary-precision integer, a decimal string in JSON
Amount = Annotated[
    int,
    BeforeValidator(validate_amount),
    PlainSerializer(str, return_type=str, when_used="json"),
    Field(description="Non-negative integer amount in base units"),
]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an identity to lowercase with 0x prefix.

    Args:
        address: An identity (with or without 0x prefix)
        validate: If True, raises ValueError for malformed identities.

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is not well formed
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a well-formed identity (0x + 40 hex chars)."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False
