"""Swap execution against the pool reserves.

A swap is priced, bounded and drain-checked before any token moves, so a
rejected swap leaves both the ledger and the reserves untouched. Only then
is the input pulled, the reserves replaced and the output pushed.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from cpamm.amm.constant_product import ConstantProduct
from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.errors import (
    InvalidAmount,
    PoolError,
    ReserveWouldDrainToZero,
    SlippageExceeded,
)
from cpamm.events import EventLog
from cpamm.guards import ReentrancyLock
from cpamm.ledger import AssetLedger, refund
from cpamm.models.events import Swapped
from cpamm.models.state import PoolState
from cpamm.models.types import validate_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class SlippageGuard:
    """Minimum acceptable swap output.

    ``min_out == 0`` disables the check; any positive bound requires
    ``amount_out >= min_out``.
    """

    min_out: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.min_out, bool) or not isinstance(self.min_out, int):
            raise InvalidAmount(f"min_out must be an integer, got {type(self.min_out).__name__}")
        if self.min_out < 0:
            raise InvalidAmount(f"min_out cannot be negative, got {self.min_out}")

    @property
    def enabled(self) -> bool:
        return self.min_out > 0

    def check(self, amount_out: int) -> None:
        if self.enabled and amount_out < self.min_out:
            raise SlippageExceeded(amount_out, self.min_out)


UNCHECKED = SlippageGuard()


@dataclass(frozen=True)
class SwapQuote:
    """A priced but not yet executed swap."""

    asset_in: str
    asset_out: str
    amount_in: int
    amount_out: int
    reserve_in: int
    reserve_out: int


class SwapEngine:
    """Prices and applies constant-product swaps in either direction."""

    def __init__(
        self,
        state: PoolState,
        ledger: AssetLedger,
        lock: ReentrancyLock,
        events: EventLog,
        pool_address: str,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        self.state = state
        self.ledger = ledger
        self.lock = lock
        self.events = events
        self.pool_address = pool_address
        self.config = config
        self.amm = ConstantProduct(fee_bps=config.fee_bps)

    def quote(self, asset_in: str, amount_in: int) -> SwapQuote:
        """Price a swap of amount_in against the current reserves.

        Read-only; no slippage or drain check.

        Raises:
            InvalidTokenQuery: If asset_in is not one of the pair
            InvalidAmount: If amount_in is not positive
            InsufficientLiquidity: If either reserve is zero
        """
        asset_in = self.state.resolve_asset(asset_in)
        if isinstance(amount_in, bool) or not isinstance(amount_in, int):
            raise InvalidAmount(f"amount_in must be an integer, got {type(amount_in).__name__}")
        reserve_in, reserve_out = self.state.get_reserves(asset_in)
        amount_out = self.amm.get_amount_out(amount_in, reserve_in, reserve_out)
        return SwapQuote(
            asset_in=asset_in,
            asset_out=self.state.get_asset_out(asset_in),
            amount_in=amount_in,
            amount_out=amount_out,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
        )

    def quote_amount_in(self, asset_out: str, amount_out: int) -> int:
        """Smallest input of the other asset that buys at least amount_out.

        Raises:
            InvalidTokenQuery: If asset_out is not one of the pair
            InvalidAmount: If amount_out is not positive
            InsufficientLiquidity: If either reserve is zero
            ReserveWouldDrainToZero: If amount_out would exhaust the reserve
        """
        asset_out = self.state.resolve_asset(asset_out)
        asset_in = self.state.get_asset_out(asset_out)
        reserve_in, reserve_out = self.state.get_reserves(asset_in)
        return self.amm.get_amount_in(amount_out, reserve_in, reserve_out)

    def swap(
        self,
        caller: str,
        asset_in: str,
        amount_in: int,
        min_out: int | None = None,
    ) -> int:
        """Swap amount_in of asset_in for the other asset.

        Args:
            caller: Account paying amount_in and receiving the output
            asset_in: Identity of the input asset
            amount_in: Exact input amount
            min_out: Minimum acceptable output; None or 0 disables the check

        Returns:
            Output amount sent to caller

        Raises:
            ReentrancyDetected: If another mutating call is in flight
            InvalidAmount: If amount_in is not positive or min_out is negative
            InsufficientLiquidity: If either reserve is zero
            SlippageExceeded: If the output is below min_out
            ReserveWouldDrainToZero: If the output reserve would fall below the minimum
            InsufficientAllowance: If caller did not approve the pool for amount_in
            InsufficientBalance: If caller does not hold amount_in
            ValueError: If caller is not a well-formed identity
        """
        with self.lock.hold("swap"):
            caller = validate_address(caller)
            guard = UNCHECKED if min_out is None else SlippageGuard(min_out)
            try:
                quote = self.quote(asset_in, amount_in)
                guard.check(quote.amount_out)
                remaining = quote.reserve_out - quote.amount_out
                if remaining < self.config.min_output_reserve:
                    raise ReserveWouldDrainToZero(
                        f"Output {quote.amount_out} would leave {remaining} of reserve "
                        f"{quote.reserve_out}"
                    )
            except PoolError as err:
                logger.debug(
                    "swap_rejected",
                    user=caller,
                    asset_in=asset_in,
                    amount_in=amount_in,
                    reason=type(err).__name__,
                )
                raise

            return self._execute(caller, quote)

    def _execute(self, caller: str, quote: SwapQuote) -> int:
        state = self.state
        before = state.reserves

        self.ledger.transfer_from(
            quote.asset_in, self.pool_address, caller, self.pool_address, quote.amount_in
        )
        state.reserves = state.with_swap(quote.asset_in, quote.amount_in, quote.amount_out)
        try:
            self.ledger.transfer(quote.asset_out, self.pool_address, caller, quote.amount_out)
        except Exception:
            # Undo the swap: restore reserves and refund the pulled input
            state.reserves = before
            refund(self.ledger, quote.asset_in, self.pool_address, caller, quote.amount_in)
            raise

        logger.info(
            "swap_executed",
            user=caller,
            asset_in=quote.asset_in,
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
            reserve_a=state.reserve_a,
            reserve_b=state.reserve_b,
        )
        self.events.emit(
            Swapped(
                user=caller,
                asset_in=quote.asset_in,
                amount_in=quote.amount_in,
                amount_out=quote.amount_out,
            )
        )
        return quote.amount_out
