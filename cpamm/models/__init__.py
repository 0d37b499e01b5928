"""Pydantic models and state containers for the pool."""

from cpamm.models.events import LiquidityAdded, LiquidityRemoved, PoolEvent, Swapped
from cpamm.models.state import PoolSnapshot, PoolState
from cpamm.models.types import Address, Amount, is_valid_address, normalize_address

__all__ = [
    # Events
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swapped",
    "PoolEvent",
    # State
    "PoolState",
    "PoolSnapshot",
    # Types
    "Address",
    "Amount",
    "normalize_address",
    "is_valid_address",
]
