"""Owner-only liquidity provisioning.

The owner is the pool's only liquidity provider. Deposits and withdrawals
are absolute amounts; there is no share ledger and no proportionality
check, so an imbalanced deposit moves the spot price. Removing only one
side down to zero is allowed and leaves the pool unpriceable until the
owner tops it up again.
"""

from __future__ import annotations

import structlog

from cpamm.errors import InsufficientAllowance, InsufficientReserves, InvalidAmount
from cpamm.events import EventLog
from cpamm.guards import ReentrancyLock, check_owner
from cpamm.ledger import AssetLedger, refund
from cpamm.models.events import LiquidityAdded, LiquidityRemoved
from cpamm.models.state import PoolState
from cpamm.models.types import normalize_address

logger = structlog.get_logger()


class LiquidityManager:
    """Adds and removes pool reserves on behalf of the owner."""

    def __init__(
        self,
        state: PoolState,
        ledger: AssetLedger,
        lock: ReentrancyLock,
        events: EventLog,
        pool_address: str,
    ) -> None:
        self.state = state
        self.ledger = ledger
        self.lock = lock
        self.events = events
        self.pool_address = pool_address

    def add_liquidity(self, caller: str, amount_a: int, amount_b: int) -> None:
        """Pull amount_a / amount_b from the owner into the reserves.

        The owner must have approved the pool for both amounts beforehand.

        Raises:
            ReentrancyDetected: If another mutating call is in flight
            Unauthorized: If caller is not the owner
            InvalidAmount: If either amount is not positive
            InsufficientAllowance: If the pool may not pull an amount
            InsufficientBalance: If the owner does not hold an amount
        """
        with self.lock.hold("add_liquidity"):
            check_owner(self.state, caller)
            caller = normalize_address(caller)
            _require_positive(amount_a, "amount_a")
            _require_positive(amount_b, "amount_b")

            state = self.state
            for asset, amount in ((state.asset_a, amount_a), (state.asset_b, amount_b)):
                allowed = self.ledger.allowance(asset, caller, self.pool_address)
                if allowed < amount:
                    logger.warning(
                        "add_liquidity_rejected",
                        reason="insufficient_allowance",
                        asset=asset,
                        allowance=allowed,
                        amount=amount,
                    )
                    raise InsufficientAllowance(asset, caller, self.pool_address, allowed, amount)

            self.ledger.transfer_from(
                state.asset_a, self.pool_address, caller, self.pool_address, amount_a
            )
            try:
                self.ledger.transfer_from(
                    state.asset_b, self.pool_address, caller, self.pool_address, amount_b
                )
            except Exception:
                # Hand asset A back so the failed deposit moves nothing
                refund(self.ledger, state.asset_a, self.pool_address, caller, amount_a)
                raise

            reserve_a, reserve_b = state.reserves
            state.reserves = (reserve_a + amount_a, reserve_b + amount_b)

            logger.info(
                "liquidity_added",
                provider=caller,
                amount_a=amount_a,
                amount_b=amount_b,
                reserve_a=state.reserve_a,
                reserve_b=state.reserve_b,
            )
            self.events.emit(LiquidityAdded(provider=caller, amount_a=amount_a, amount_b=amount_b))

    def remove_liquidity(self, caller: str, amount_a: int, amount_b: int) -> None:
        """Withdraw amount_a / amount_b from the reserves back to the owner.

        Asset A is pushed before asset B. If pushing A fails the reserves are
        restored. If pushing B fails after A has left the pool, only the B
        reserve is restored: the call raises with the reserves at
        (reserve_a - amount_a, reserve_b), matching what the pool still holds.

        Raises:
            ReentrancyDetected: If another mutating call is in flight
            Unauthorized: If caller is not the owner
            InvalidAmount: If either amount is negative
            InsufficientReserves: If either amount exceeds its reserve
        """
        with self.lock.hold("remove_liquidity"):
            check_owner(self.state, caller)
            caller = normalize_address(caller)
            _require_non_negative(amount_a, "amount_a")
            _require_non_negative(amount_b, "amount_b")

            state = self.state
            before = state.reserves
            reserve_a, reserve_b = before
            if reserve_a < amount_a or reserve_b < amount_b:
                logger.warning(
                    "remove_liquidity_rejected",
                    reason="insufficient_reserves",
                    amount_a=amount_a,
                    amount_b=amount_b,
                    reserve_a=reserve_a,
                    reserve_b=reserve_b,
                )
                raise InsufficientReserves(
                    f"Cannot remove ({amount_a}, {amount_b}) "
                    f"from reserves ({reserve_a}, {reserve_b})"
                )

            state.reserves = (reserve_a - amount_a, reserve_b - amount_b)
            try:
                self.ledger.transfer(state.asset_a, self.pool_address, caller, amount_a)
            except Exception:
                state.reserves = before
                raise
            try:
                self.ledger.transfer(state.asset_b, self.pool_address, caller, amount_b)
            except Exception:
                # Asset A already left the pool; only B is still held
                state.reserves = (reserve_a - amount_a, reserve_b)
                logger.error(
                    "remove_liquidity_partial",
                    asset=state.asset_b,
                    amount_b=amount_b,
                )
                raise

            if (state.reserve_a == 0) != (state.reserve_b == 0):
                logger.warning(
                    "pool_one_sided",
                    reserve_a=state.reserve_a,
                    reserve_b=state.reserve_b,
                )
            logger.info(
                "liquidity_removed",
                provider=caller,
                amount_a=amount_a,
                amount_b=amount_b,
                reserve_a=state.reserve_a,
                reserve_b=state.reserve_b,
            )
            self.events.emit(
                LiquidityRemoved(provider=caller, amount_a=amount_a, amount_b=amount_b)
            )


def _require_positive(amount: int, name: str) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"{name} must be an integer, got {type(amount).__name__}")
    if amount <= 0:
        raise InvalidAmount(f"{name} must be positive, got {amount}")


def _require_non_negative(amount: int, name: str) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"{name} must be an integer, got {type(amount).__name__}")
    if amount < 0:
        raise InvalidAmount(f"{name} cannot be negative, got {amount}")
