"""Test helpers module for shared test utilities.

- constants: demo asset pair, accounts and common amounts
- factories: pool and funding factory functions
"""

from tests.helpers.constants import (
    FUNDING,
    INITIAL_RESERVE,
    ONE,
    OWNER,
    POOL,
    STRANGER,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    TRADER,
)
from tests.helpers.factories import fund, make_pool

__all__ = [
    "FUNDING",
    "INITIAL_RESERVE",
    "ONE",
    "OWNER",
    "POOL",
    "STRANGER",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "TRADER",
    "fund",
    "make_pool",
]
