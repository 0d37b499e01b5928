"""Pydantic models for pool notifications.

Notifications are appended to the pool's event log once an operation has
fully succeeded. The ``kind`` field discriminates them when serialized.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Discriminator, Field

from cpamm.models.types import Address, Amount


class LiquidityAdded(BaseModel):
    """Owner deposited reserves into the pool."""

    kind: Literal["liquidityAdded"] = "liquidityAdded"
    provider: Address
    amount_a: Amount = Field(alias="amountA")
    amount_b: Amount = Field(alias="amountB")

    model_config = {"populate_by_name": True, "frozen": True}


class LiquidityRemoved(BaseModel):
    """Owner withdrew reserves from the pool."""

    kind: Literal["liquidityRemoved"] = "liquidityRemoved"
    provider: Address
    amount_a: Amount = Field(alias="amountA")
    amount_b: Amount = Field(alias="amountB")

    model_config = {"populate_by_name": True, "frozen": True}


class Swapped(BaseModel):
    """A caller swapped one asset for the other."""

    kind: Literal["swapped"] = "swapped"
    user: Address
    asset_in: Address = Field(alias="assetIn", description="Identity of the input asset.")
    amount_in: Amount = Field(alias="amountIn")
    amount_out: Amount = Field(alias="amountOut")

    model_config = {"populate_by_name": True, "frozen": True}


PoolEvent = Annotated[
    LiquidityAdded | LiquidityRemoved | Swapped,
    Discriminator("kind"),
]
