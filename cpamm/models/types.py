"""Shared type definitions for pools and wire models."""

import hashlib
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from cpamm.constants import UINT256_MAX
from cpamm.errors import InvalidAsset


def validate_uint256(value: Any) -> str:
    """Validate that a value is a valid uint256 decimal string.

    Args:
        value: Value to validate (string or int)

    Returns:
        Valid uint256 as decimal string

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 cannot be a boolean")
    if isinstance(value, int):
        int_value = value
    elif isinstance(value, str):
        try:
            int_value = int(value)
        except ValueError as err:
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'") from err
    else:
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")

    if int_value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if int_value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return str(int_value)


# 256-bit unsigned integer as decimal string (validated)
Uint256 = Annotated[
    str,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer as decimal string"),
]

# Opaque asset or account identifier
Identifier = Annotated[str, Field(min_length=1, max_length=128)]


def normalize_asset(asset: str) -> str:
    """Strip surrounding whitespace from an asset identifier.

    Raises:
        InvalidAsset: If the identifier is empty
    """
    normalized = asset.strip()
    if not normalized:
        raise InvalidAsset("Asset identifier cannot be empty")
    return normalized


def sort_assets(asset_x: str, asset_y: str) -> tuple[str, str]:
    """Order two asset identifiers canonically.

    A pair always maps to the same (asset_a, asset_b) regardless of
    argument order.

    Raises:
        InvalidAsset: If the identifiers are equal or empty
    """
    x, y = normalize_asset(asset_x), normalize_asset(asset_y)
    if x == y:
        raise InvalidAsset(f"Pool assets must differ: {x}")
    return (x, y) if x < y else (y, x)


def pool_address(asset_a: str, asset_b: str) -> str:
    """Derive the deterministic ledger account of the pool for a pair."""
    a, b = sort_assets(asset_a, asset_b)
    digest = hashlib.sha256(f"{a}\x00{b}".encode()).hexdigest()
    return "0x" + digest[:40]
