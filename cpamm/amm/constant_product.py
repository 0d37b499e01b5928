"""Constant-product AMM math.

The pool prices swaps with the constant product formula: x * y = k,
charging a fee on the input amount. With the default 30 bps fee:

    amount_out = (amount_in * 997 * reserve_out) / (reserve_in * 1000 + amount_in * 997)

evaluated in basis points as

    amount_out = (amount_in * 9970 * reserve_out) / (reserve_in * 10000 + amount_in * 9970)

which is the same fraction with numerator and denominator scaled by 10.
Everything is multiplied out before the single floor division, so the
output is always rounded down, in the pool's favour.
"""

from __future__ import annotations

from dataclasses import dataclass

from cpamm.constants import FEE_BASE, FEE_BPS
from cpamm.errors import InsufficientLiquidity, InvalidAmount, ReserveWouldDrainToZero
from cpamm.safe_int import S


def fee_multiplier(fee_bps: int = FEE_BPS) -> int:
    """Fee multiplier for AMM math (10000 - fee_bps).

    For 30 bps (0.3%), this returns 9970.

    Raises:
        ValueError: If fee_bps is outside [0, 10000)
    """
    if not 0 <= fee_bps < FEE_BASE:
        raise ValueError(f"Fee must be in [0, {FEE_BASE}) bps, got {fee_bps}")
    return FEE_BASE - fee_bps


@dataclass(frozen=True)
class ConstantProduct:
    """Fee-adjusted constant-product pricing for a two-asset pool."""

    fee_bps: int = FEE_BPS

    def __post_init__(self) -> None:
        fee_multiplier(self.fee_bps)

    @property
    def fee_multiplier(self) -> int:
        return fee_multiplier(self.fee_bps)

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount for an exact input.

        Formula: amount_out = (in * fee * res_out) / (res_in * 10000 + in * fee)

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount, rounded down

        Raises:
            InvalidAmount: If amount_in is not positive
            InsufficientLiquidity: If either reserve is zero
        """
        if amount_in <= 0:
            raise InvalidAmount(f"Swap input must be positive, got {amount_in}")
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity(
                f"Pool reserves must be positive, got ({reserve_in}, {reserve_out})"
            )

        amount_in_with_fee = S(amount_in) * S(self.fee_multiplier)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(FEE_BASE) + amount_in_with_fee

        return (numerator // denominator).value

    def get_amount_in(self, amount_out: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate the smallest input that yields at least amount_out.

        Formula: amount_in = ceil((res_in * out * 10000) / ((res_out - out) * fee))

        Raises:
            InvalidAmount: If amount_out is not positive
            InsufficientLiquidity: If either reserve is zero
            ReserveWouldDrainToZero: If amount_out is not below reserve_out
        """
        if amount_out <= 0:
            raise InvalidAmount(f"Swap output must be positive, got {amount_out}")
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity(
                f"Pool reserves must be positive, got ({reserve_in}, {reserve_out})"
            )
        if amount_out >= reserve_out:
            raise ReserveWouldDrainToZero(
                f"Output {amount_out} would exhaust reserve {reserve_out}"
            )

        numerator = S(reserve_in) * S(amount_out) * S(FEE_BASE)
        denominator = (S(reserve_out) - S(amount_out)) * S(self.fee_multiplier)
        return numerator.ceiling_div(denominator).value


# Default 0.3% instance
constant_product = ConstantProduct()
