"""Two-asset constant-product liquidity pool.

LiquidityPool wires the pool state to its components:
- LiquidityManager: owner-only add/remove liquidity
- SwapEngine: fee-adjusted constant-product swaps with slippage bound
- PriceOracle: fixed-point spot price from the reserve ratio

Every mutating entry point holds the pool's ReentrancyLock for its whole
duration, including the ledger calls. Reads never take the lock.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable

import structlog

from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.events import EventLog, Subscriber
from cpamm.guards import ReentrancyLock
from cpamm.ledger import AssetLedger
from cpamm.liquidity import LiquidityManager
from cpamm.models.events import PoolEvent
from cpamm.models.state import PoolSnapshot, PoolState
from cpamm.models.types import normalize_address
from cpamm.oracle import PriceOracle
from cpamm.swap import SwapEngine

logger = structlog.get_logger()


class LiquidityPool:
    """A single-owner pool of two assets held on an AssetLedger.

    Usage:
        pool = LiquidityPool(owner, token_a, token_b, ledger)
        ledger.approve(token_a, owner, pool.address, 100 * 10**18)
        ledger.approve(token_b, owner, pool.address, 100 * 10**18)
        pool.add_liquidity(owner, 100 * 10**18, 100 * 10**18)
        amount_out = pool.swap_a_for_b(trader, 10**18, min_out=9 * 10**17)
    """

    def __init__(
        self,
        owner: str,
        asset_a: str,
        asset_b: str,
        ledger: AssetLedger,
        *,
        address: str | None = None,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        """Create an empty pool; owner becomes the sole liquidity manager.

        Raises:
            ValueError: If an identity is malformed or both assets are the same
        """
        owner = normalize_address(owner, validate=True)
        asset_a = normalize_address(asset_a, validate=True)
        asset_b = normalize_address(asset_b, validate=True)
        if asset_a == asset_b:
            raise ValueError(f"Pool assets must differ, got {asset_a} twice")
        if address is None:
            address = "0x" + secrets.token_hex(20)

        self.address = normalize_address(address, validate=True)
        self.config = config
        self.ledger = ledger
        self._state = PoolState(owner=owner, asset_a=asset_a, asset_b=asset_b)
        self._lock = ReentrancyLock()
        self._events = EventLog()

        self.liquidity = LiquidityManager(
            self._state, ledger, self._lock, self._events, self.address
        )
        self.swaps = SwapEngine(
            self._state, ledger, self._lock, self._events, self.address, config
        )
        self.oracle = PriceOracle(self._state, config)

        logger.info(
            "pool_created",
            pool=self.address,
            owner=owner,
            asset_a=asset_a,
            asset_b=asset_b,
            fee_bps=config.fee_bps,
        )

    # --- Persisted state ---

    @property
    def owner(self) -> str:
        return self._state.owner

    @property
    def asset_a(self) -> str:
        return self._state.asset_a

    @property
    def asset_b(self) -> str:
        return self._state.asset_b

    @property
    def reserve_a(self) -> int:
        return self._state.reserve_a

    @property
    def reserve_b(self) -> int:
        return self._state.reserve_b

    @property
    def is_active(self) -> bool:
        return self._state.is_active

    def get_reserves(self) -> tuple[int, int]:
        """Current (reserve_a, reserve_b), read atomically."""
        return self._state.reserves

    def snapshot(self) -> PoolSnapshot:
        return self._state.snapshot()

    # --- Liquidity ---

    def add_liquidity(self, caller: str, amount_a: int, amount_b: int) -> None:
        self.liquidity.add_liquidity(caller, amount_a, amount_b)

    def remove_liquidity(self, caller: str, amount_a: int, amount_b: int) -> None:
        self.liquidity.remove_liquidity(caller, amount_a, amount_b)

    # --- Swaps ---

    def swap_a_for_b(self, caller: str, amount_in: int, min_out: int | None = None) -> int:
        """Sell amount_in of asset A for asset B. Returns the B amount received."""
        return self.swaps.swap(caller, self._state.asset_a, amount_in, min_out)

    def swap_b_for_a(self, caller: str, amount_in: int, min_out: int | None = None) -> int:
        """Sell amount_in of asset B for asset A. Returns the A amount received."""
        return self.swaps.swap(caller, self._state.asset_b, amount_in, min_out)

    def quote(self, asset_in: str, amount_in: int) -> int:
        """Output a swap of amount_in would currently receive."""
        return self.swaps.quote(asset_in, amount_in).amount_out

    def quote_amount_in(self, asset_out: str, amount_out: int) -> int:
        """Input currently needed to receive at least amount_out of asset_out."""
        return self.swaps.quote_amount_in(asset_out, amount_out)

    # --- Prices ---

    def get_price(self, asset: str) -> int:
        return self.oracle.get_price(asset)

    # --- Notifications ---

    @property
    def events(self) -> tuple[PoolEvent, ...]:
        return self._events.events

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Observe every notification; returns an unsubscribe function."""
        return self._events.subscribe(callback)
