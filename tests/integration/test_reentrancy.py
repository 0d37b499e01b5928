"""Reentrancy through ledger callbacks and concurrent callers."""

import threading

import pytest

from cpamm.errors import InvalidAmount, ReentrancyDetected
from cpamm.ledger import InMemoryLedger
from tests.helpers import INITIAL_RESERVE, ONE, OWNER, TOKEN_A, TRADER, fund, make_pool


class ReentrantHook:
    """Ledger hook that calls back into the pool once, recording the outcome."""

    def __init__(self, action):
        self.action = action
        self.armed = False
        self.errors: list[Exception] = []
        self.reads: list[tuple[int, int]] = []
        self.pool = None

    def __call__(self, asset, sender, to, amount):
        if not self.armed:
            return
        self.armed = False
        self.reads.append(self.pool.get_reserves())
        try:
            self.action(self.pool)
        except ReentrancyDetected as err:
            self.errors.append(err)


def _pool_with_hook(action):
    hook = ReentrantHook(action)
    ledger, pool = make_pool(INITIAL_RESERVE, INITIAL_RESERVE, ledger=InMemoryLedger(hook))
    fund(ledger, TRADER)
    hook.pool = pool
    return hook, pool


@pytest.mark.parametrize(
    "action",
    [
        lambda pool: pool.swap_a_for_b(TRADER, ONE),
        lambda pool: pool.swap_b_for_a(TRADER, ONE),
        lambda pool: pool.add_liquidity(OWNER, ONE, ONE),
        lambda pool: pool.remove_liquidity(OWNER, ONE, ONE),
    ],
)
def test_reentrant_call_from_swap_rejected(action):
    hook, pool = _pool_with_hook(action)
    hook.armed = True

    amount_out = pool.swap_a_for_b(TRADER, 10 * ONE)

    assert len(hook.errors) == 1
    assert pool.get_reserves() == (110 * ONE, INITIAL_RESERVE - amount_out)
    assert len(pool.events) == 2


def test_reentrant_call_from_remove_rejected():
    hook, pool = _pool_with_hook(lambda p: p.swap_a_for_b(TRADER, ONE))
    hook.armed = True

    pool.remove_liquidity(OWNER, ONE, ONE)

    assert len(hook.errors) == 1
    assert pool.get_reserves() == (INITIAL_RESERVE - ONE, INITIAL_RESERVE - ONE)


def test_reads_allowed_during_mutation():
    """Price and reserve reads work mid-call and see the pre-swap state."""
    prices = []
    hook, pool = _pool_with_hook(lambda p: prices.append(p.get_price(TOKEN_A)))
    hook.armed = True

    pool.swap_a_for_b(TRADER, 10 * ONE)

    assert hook.errors == []
    assert hook.reads == [(INITIAL_RESERVE, INITIAL_RESERVE)]
    assert prices == [10**18]


def test_lock_released_after_failure(pool):
    with pytest.raises(InvalidAmount):
        pool.swap_a_for_b(TRADER, 0)
    # Would raise ReentrancyDetected if the lock leaked
    assert pool.swap_a_for_b(TRADER, ONE) > 0


def test_concurrent_mutation_fails_fast():
    """A second thread arriving mid-swap is rejected, not queued."""
    entered = threading.Event()
    release = threading.Event()

    def block(asset, sender, to, amount):
        if sender == TRADER:
            entered.set()
            release.wait(timeout=5)

    ledger, pool = make_pool(INITIAL_RESERVE, INITIAL_RESERVE, ledger=InMemoryLedger(block))
    fund(ledger, TRADER)

    worker = threading.Thread(target=pool.swap_a_for_b, args=(TRADER, ONE))
    worker.start()
    try:
        assert entered.wait(timeout=5)
        with pytest.raises(ReentrancyDetected):
            pool.remove_liquidity(OWNER, 1, 1)
        # Reads are never blocked
        assert pool.get_price(TOKEN_A) == 10**18
    finally:
        release.set()
        worker.join(timeout=5)

    assert pool.reserve_a == INITIAL_RESERVE + ONE
