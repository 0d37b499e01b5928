"""Pool state: the single source of truth for reserves and ownership."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

from cpamm.errors import InvalidTokenQuery
from cpamm.models.types import Address, Amount, is_valid_address, normalize_address


@dataclass
class PoolState:
    """Reserves, owner and asset pair of a two-asset pool.

    ``owner``, ``asset_a`` and ``asset_b`` are fixed at construction.
    Both reserves live in one tuple that is replaced in a single assignment,
    so a reader never sees one side updated without the other.
    """

    owner: str
    asset_a: str
    asset_b: str
    reserves: tuple[int, int] = (0, 0)

    @property
    def reserve_a(self) -> int:
        return self.reserves[0]

    @property
    def reserve_b(self) -> int:
        return self.reserves[1]

    @property
    def is_active(self) -> bool:
        """True when both reserves are positive."""
        reserve_a, reserve_b = self.reserves
        return reserve_a > 0 and reserve_b > 0

    @property
    def product(self) -> int:
        """Reserve product k = reserve_a * reserve_b."""
        reserve_a, reserve_b = self.reserves
        return reserve_a * reserve_b

    def has_asset(self, asset: str) -> bool:
        return asset in (self.asset_a, self.asset_b)

    def resolve_asset(self, asset: str) -> str:
        """Normalize asset and check it is one of the pair.

        Raises:
            InvalidTokenQuery: If asset is malformed or not one of the pair
        """
        if not isinstance(asset, str) or not is_valid_address(normalize_address(asset)):
            raise InvalidTokenQuery(f"Malformed asset identity: {asset!r}")
        asset = normalize_address(asset)
        if not self.has_asset(asset):
            raise InvalidTokenQuery(f"Asset {asset} is not traded by this pool")
        return asset

    def get_reserves(self, asset_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out).

        Raises:
            ValueError: If asset_in is not one of the pair
        """
        reserve_a, reserve_b = self.reserves
        if asset_in == self.asset_a:
            return reserve_a, reserve_b
        if asset_in == self.asset_b:
            return reserve_b, reserve_a
        raise ValueError(f"Asset {asset_in} not in pool")

    def get_asset_out(self, asset_in: str) -> str:
        """Get the output asset for a given input asset."""
        if asset_in == self.asset_a:
            return self.asset_b
        if asset_in == self.asset_b:
            return self.asset_a
        raise ValueError(f"Asset {asset_in} not in pool")

    def with_swap(self, asset_in: str, amount_in: int, amount_out: int) -> tuple[int, int]:
        """Reserves after crediting amount_in and debiting amount_out."""
        reserve_a, reserve_b = self.reserves
        if asset_in == self.asset_a:
            return reserve_a + amount_in, reserve_b - amount_out
        return reserve_a - amount_out, reserve_b + amount_in

    def snapshot(self) -> PoolSnapshot:
        reserve_a, reserve_b = self.reserves
        return PoolSnapshot(
            owner=self.owner,
            asset_a=self.asset_a,
            asset_b=self.asset_b,
            reserve_a=reserve_a,
            reserve_b=reserve_b,
        )


class PoolSnapshot(BaseModel):
    """Externally readable pool state (the five persisted fields)."""

    owner: Address
    asset_a: Address = Field(alias="assetA")
    asset_b: Address = Field(alias="assetB")
    reserve_a: Amount = Field(alias="reserveA")
    reserve_b: Amount = Field(alias="reserveB")

    model_config = {"populate_by_name": True, "frozen": True}
