"""Spot price read from the current reserve ratio."""

from __future__ import annotations

from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.errors import DivisionByZero
from cpamm.models.state import PoolState
from cpamm.safe_int import S


class PriceOracle:
    """Fixed-point spot price of either pool asset in terms of the other.

    Reads the reserves once and never takes the pool lock. The price can be
    moved by any swap right before the query; it is not manipulation
    resistant.
    """

    def __init__(self, state: PoolState, config: PoolConfig = DEFAULT_POOL_CONFIG) -> None:
        self.state = state
        self.scale = config.price_scale

    def get_price(self, asset: str) -> int:
        """Price of one unit of asset in units of the other, times the scale.

        price = other_reserve * scale // this_reserve

        Raises:
            InvalidTokenQuery: If asset is not one of the pair
            DivisionByZero: If the reserve of asset is zero
        """
        asset = self.state.resolve_asset(asset)

        this_reserve, other_reserve = self.state.get_reserves(asset)
        if this_reserve == 0:
            raise DivisionByZero(f"Reserve of {asset} is zero; price is undefined")

        return (S(other_reserve) * S(self.scale) // S(this_reserve)).value
