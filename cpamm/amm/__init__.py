"""AMM pricing math."""

from cpamm.amm.constant_product import ConstantProduct, constant_product, fee_multiplier

__all__ = [
    "ConstantProduct",
    "constant_product",
    "fee_multiplier",
]
