"""Two-asset constant-product liquidity pool."""

from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.errors import (
    DivisionByZero,
    InsufficientAllowance,
    InsufficientBalance,
    InsufficientLiquidity,
    InsufficientReserves,
    InvalidAmount,
    InvalidTokenQuery,
    LedgerError,
    PoolError,
    ReentrancyDetected,
    ReserveWouldDrainToZero,
    SlippageExceeded,
    Unauthorized,
)
from cpamm.ledger import AssetLedger, InMemoryLedger
from cpamm.models import LiquidityAdded, LiquidityRemoved, PoolSnapshot, Swapped
from cpamm.pool import LiquidityPool

__version__ = "0.1.0"
__all__ = [
    "LiquidityPool",
    "PoolConfig",
    "DEFAULT_POOL_CONFIG",
    # Ledger
    "AssetLedger",
    "InMemoryLedger",
    # Models
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swapped",
    "PoolSnapshot",
    # Errors
    "PoolError",
    "Unauthorized",
    "InvalidAmount",
    "InsufficientLiquidity",
    "InsufficientReserves",
    "InsufficientAllowance",
    "InsufficientBalance",
    "LedgerError",
    "SlippageExceeded",
    "ReserveWouldDrainToZero",
    "InvalidTokenQuery",
    "DivisionByZero",
    "ReentrancyDetected",
    "__version__",
]
