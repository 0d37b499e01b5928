"""Asset ledger the pool moves tokens through.

The pool never stores balances itself. It calls an AssetLedger to pull
input tokens from callers (``transfer_from``) and push output tokens back
(``transfer``). InMemoryLedger is a small ERC20-style implementation
holding both assets of a demo pair; it is what the tests run against.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Protocol, runtime_checkable

import structlog

from cpamm.errors import InsufficientAllowance, InsufficientBalance, InvalidAmount
from cpamm.models.types import normalize_address

logger = structlog.get_logger()

# (asset, sender, recipient, amount)
TransferHook = Callable[[str, str, str, int], None]


@runtime_checkable
class AssetLedger(Protocol):
    """Token ledger interface required by the pool.

    Implementations must raise InsufficientAllowance / InsufficientBalance
    and leave balances untouched when a transfer cannot be honoured.
    """

    def transfer(self, asset: str, sender: str, to: str, amount: int) -> None:
        """Move amount of asset from sender to to."""
        ...

    def transfer_from(self, asset: str, spender: str, owner: str, to: str, amount: int) -> None:
        """Move amount of owner's asset to to, spending spender's allowance."""
        ...

    def allowance(self, asset: str, owner: str, spender: str) -> int:
        """Amount of owner's asset spender may still move."""
        ...


class InMemoryLedger:
    """ERC20-style balances and allowances for any number of assets.

    Usage:
        ledger = InMemoryLedger()
        ledger.mint(TOKEN_A, alice, 100 * 10**18)
        ledger.approve(TOKEN_A, alice, pool_address, 100 * 10**18)
    """

    def __init__(self, on_transfer: TransferHook | None = None) -> None:
        self._balances: defaultdict[tuple[str, str], int] = defaultdict(int)
        self._allowances: defaultdict[tuple[str, str, str], int] = defaultdict(int)
        self._supply: defaultdict[str, int] = defaultdict(int)
        self.on_transfer = on_transfer

    def balance_of(self, asset: str, account: str) -> int:
        return self._balances.get((normalize_address(asset), normalize_address(account)), 0)

    def total_supply(self, asset: str) -> int:
        return self._supply.get(normalize_address(asset), 0)

    def allowance(self, asset: str, owner: str, spender: str) -> int:
        key = (normalize_address(asset), normalize_address(owner), normalize_address(spender))
        return self._allowances.get(key, 0)

    def mint(self, asset: str, to: str, amount: int) -> None:
        """Create new units of asset in to's balance."""
        _check_amount(amount)
        asset, to = normalize_address(asset), normalize_address(to)
        self._balances[(asset, to)] += amount
        self._supply[asset] += amount

    def approve(self, asset: str, owner: str, spender: str, amount: int) -> None:
        """Set (not increase) spender's allowance over owner's asset."""
        _check_amount(amount)
        key = (normalize_address(asset), normalize_address(owner), normalize_address(spender))
        self._allowances[key] = amount

    def transfer(self, asset: str, sender: str, to: str, amount: int) -> None:
        """Move amount of asset from sender to to.

        Raises:
            InvalidAmount: If amount is negative
            InsufficientBalance: If sender holds less than amount
        """
        _check_amount(amount)
        asset = normalize_address(asset)
        sender, to = normalize_address(sender), normalize_address(to)
        self._move(asset, sender, to, amount)

    def transfer_from(self, asset: str, spender: str, owner: str, to: str, amount: int) -> None:
        """Move amount of owner's asset to to on behalf of spender.

        The allowance is checked before the balance, and is only spent
        once the move succeeds.

        Raises:
            InvalidAmount: If amount is negative
            InsufficientAllowance: If spender's allowance is below amount
            InsufficientBalance: If owner holds less than amount
        """
        _check_amount(amount)
        asset = normalize_address(asset)
        spender, owner, to = (normalize_address(a) for a in (spender, owner, to))

        key = (asset, owner, spender)
        allowed = self._allowances.get(key, 0)
        if allowed < amount:
            logger.debug(
                "transfer_from_rejected",
                asset=asset,
                owner=owner,
                spender=spender,
                allowance=allowed,
                amount=amount,
            )
            raise InsufficientAllowance(asset, owner, spender, allowed, amount)

        self._move(asset, owner, to, amount)
        self._allowances[key] = allowed - amount

    def _move(self, asset: str, sender: str, to: str, amount: int) -> None:
        self._require_balance(asset, sender, amount)

        # Hook runs before balances move; raising from it aborts the transfer
        if self.on_transfer is not None:
            self.on_transfer(asset, sender, to, amount)
            self._require_balance(asset, sender, amount)

        balance = self._balances[(asset, sender)]
        self._balances[(asset, sender)] = balance - amount
        self._balances[(asset, to)] += amount

    def _require_balance(self, asset: str, account: str, amount: int) -> None:
        balance = self._balances.get((asset, account), 0)
        if balance < amount:
            raise InsufficientBalance(asset, account, balance, amount)


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"Amount must be an integer, got {type(amount).__name__}")
    if amount < 0:
        raise InvalidAmount(f"Amount cannot be negative: {amount}")


def refund(ledger: AssetLedger, asset: str, sender: str, to: str, amount: int) -> None:
    """Hand amount of asset back to to after a failed operation.

    A failing refund is logged as ``refund_failed`` and not raised.
    """
    try:
        ledger.transfer(asset, sender, to, amount)
    except Exception:
        logger.exception("refund_failed", asset=asset, to=to, amount=amount)
