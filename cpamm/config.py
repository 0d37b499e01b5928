"""Pool configuration."""

import os
from dataclasses import dataclass

from cpamm.amm.constant_product import fee_multiplier
from cpamm.constants import FEE_BPS, MIN_OUTPUT_RESERVE, PRICE_SCALE


@dataclass(frozen=True)
class PoolConfig:
    """Centralized configuration for pool pricing.

    Attributes:
        fee_bps: Swap fee in basis points (default: 30 = 0.3%)
        price_scale: Fixed-point scale of spot prices (default: 1e18)
        min_output_reserve: Smallest output reserve a swap may leave (default: 1)
    """

    fee_bps: int = FEE_BPS
    price_scale: int = PRICE_SCALE
    min_output_reserve: int = MIN_OUTPUT_RESERVE

    def __post_init__(self) -> None:
        fee_multiplier(self.fee_bps)
        if self.price_scale <= 0:
            raise ValueError(f"price_scale must be positive, got {self.price_scale}")
        if self.min_output_reserve < 1:
            raise ValueError(
                f"min_output_reserve must be at least 1, got {self.min_output_reserve}"
            )

    @classmethod
    def from_env(cls) -> "PoolConfig":
        """Build a config from environment variables.

        - CPAMM_FEE_BPS: swap fee in basis points (default: 30)
        """
        return cls(fee_bps=int(os.environ.get("CPAMM_FEE_BPS", str(FEE_BPS))))


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
