"""Tests for pool state and pydantic models."""

import json

import pytest
from pydantic import TypeAdapter, ValidationError

from cpamm.errors import InvalidTokenQuery
from cpamm.models import (
    LiquidityAdded,
    LiquidityRemoved,
    PoolEvent,
    PoolSnapshot,
    PoolState,
    Swapped,
    is_valid_address,
    normalize_address,
)
from tests.helpers import OWNER, TOKEN_A, TOKEN_B, TOKEN_C, TRADER


class TestAddressHelpers:
    """Tests for identity normalisation."""

    def test_normalize_lowercases(self):
        assert normalize_address("0xABCDEF0000000000000000000000000000000001") == (
            "0xabcdef0000000000000000000000000000000001"
        )

    def test_normalize_adds_prefix(self):
        assert normalize_address(TOKEN_A[2:]) == TOKEN_A

    def test_normalize_validate_rejects_malformed(self):
        with pytest.raises(ValueError):
            normalize_address("0x1234", validate=True)

    @pytest.mark.parametrize(
        "address,valid",
        [
            (TOKEN_A, True),
            ("0x1234", False),
            ("1111111111111111111111111111111111111111", False),
            ("0xzz11111111111111111111111111111111111111", False),
        ],
    )
    def test_is_valid_address(self, address, valid):
        assert is_valid_address(address) is valid


class TestPoolState:
    """Tests for the reserve container."""

    def test_starts_empty(self):
        state = PoolState(owner=OWNER, asset_a=TOKEN_A, asset_b=TOKEN_B)
        assert state.reserves == (0, 0)
        assert not state.is_active

    def test_get_reserves_orders_by_input(self):
        state = PoolState(OWNER, TOKEN_A, TOKEN_B, reserves=(100, 200))
        assert state.get_reserves(TOKEN_A) == (100, 200)
        assert state.get_reserves(TOKEN_B) == (200, 100)
        with pytest.raises(ValueError):
            state.get_reserves(TOKEN_C)

    def test_get_asset_out(self):
        state = PoolState(OWNER, TOKEN_A, TOKEN_B)
        assert state.get_asset_out(TOKEN_A) == TOKEN_B
        assert state.get_asset_out(TOKEN_B) == TOKEN_A

    def test_with_swap(self):
        state = PoolState(OWNER, TOKEN_A, TOKEN_B, reserves=(100, 200))
        assert state.with_swap(TOKEN_A, 10, 15) == (110, 185)
        assert state.with_swap(TOKEN_B, 10, 5) == (95, 210)
        # Pure: the state itself is untouched
        assert state.reserves == (100, 200)

    def test_product(self):
        assert PoolState(OWNER, TOKEN_A, TOKEN_B, reserves=(3, 7)).product == 21

    def test_resolve_asset_normalises(self):
        state = PoolState(OWNER, TOKEN_A, TOKEN_B)
        assert state.resolve_asset(TOKEN_B.upper().replace("0X", "0x")) == TOKEN_B
        assert state.resolve_asset(TOKEN_A[2:]) == TOKEN_A

    @pytest.mark.parametrize("asset", [TOKEN_C, "0x12", "", None, 42])
    def test_resolve_asset_rejects(self, asset):
        with pytest.raises(InvalidTokenQuery):
            PoolState(OWNER, TOKEN_A, TOKEN_B).resolve_asset(asset)


class TestPoolSnapshot:
    """Tests for the serialisable snapshot."""

    def test_snapshot_fields(self):
        snapshot = PoolState(OWNER, TOKEN_A, TOKEN_B, reserves=(5, 6)).snapshot()
        assert snapshot.owner == OWNER
        assert snapshot.asset_a == TOKEN_A
        assert snapshot.asset_b == TOKEN_B
        assert (snapshot.reserve_a, snapshot.reserve_b) == (5, 6)

    def test_dump_by_alias(self):
        snapshot = PoolState(OWNER, TOKEN_A, TOKEN_B, reserves=(5, 6)).snapshot()
        data = snapshot.model_dump(by_alias=True)
        assert data == {
            "owner": OWNER,
            "assetA": TOKEN_A,
            "assetB": TOKEN_B,
            "reserveA": 5,
            "reserveB": 6,
        }

    def test_json_round_trip_keeps_big_ints(self):
        big = 2**300
        snapshot = PoolSnapshot(
            owner=OWNER, asset_a=TOKEN_A, asset_b=TOKEN_B, reserve_a=big, reserve_b=1
        )
        encoded = snapshot.model_dump_json()
        assert json.loads(encoded)["reserve_a"] == str(big)
        assert PoolSnapshot.model_validate_json(encoded) == snapshot

    def test_accepts_decimal_strings(self):
        snapshot = PoolSnapshot.model_validate(
            {
                "owner": OWNER,
                "assetA": TOKEN_A,
                "assetB": TOKEN_B,
                "reserveA": "10",
                "reserveB": "0",
            }
        )
        assert snapshot.reserve_a == 10

    def test_rejects_negative_reserve(self):
        with pytest.raises(ValidationError):
            PoolSnapshot(owner=OWNER, asset_a=TOKEN_A, asset_b=TOKEN_B, reserve_a=-1, reserve_b=0)

    def test_rejects_malformed_address(self):
        with pytest.raises(ValidationError):
            PoolSnapshot(owner="0x12", asset_a=TOKEN_A, asset_b=TOKEN_B, reserve_a=0, reserve_b=0)

    def test_frozen(self):
        snapshot = PoolState(OWNER, TOKEN_A, TOKEN_B).snapshot()
        with pytest.raises(ValidationError):
            snapshot.reserve_a = 1


class TestEvents:
    """Tests for notification models."""

    def test_swapped_aliases(self):
        event = Swapped(user=TRADER, asset_in=TOKEN_A, amount_in=10, amount_out=9)
        assert event.model_dump(by_alias=True) == {
            "kind": "swapped",
            "user": TRADER,
            "assetIn": TOKEN_A,
            "amountIn": 10,
            "amountOut": 9,
        }

    def test_addresses_normalised(self):
        event = LiquidityAdded(provider=OWNER.upper().replace("0X", "0x"), amount_a=1, amount_b=2)
        assert event.provider == OWNER

    def test_discriminated_union(self):
        adapter = TypeAdapter(PoolEvent)
        event = adapter.validate_python(
            {"kind": "liquidityRemoved", "provider": OWNER, "amountA": 1, "amountB": 2}
        )
        assert isinstance(event, LiquidityRemoved)
        assert event.amount_b == 2

    def test_rejects_negative_amount(self):
        with pytest.raises(ValidationError):
            LiquidityAdded(provider=OWNER, amount_a=-1, amount_b=2)
