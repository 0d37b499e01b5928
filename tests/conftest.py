"""Pytest configuration and fixtures."""

import pytest

from cpamm.ledger import InMemoryLedger
from cpamm.log import configure_logging
from cpamm.pool import LiquidityPool
from tests.helpers import INITIAL_RESERVE, TRADER, fund, make_pool
from tests.helpers.constants import TEST_LOG_LEVEL


def pytest_configure(config: pytest.Config) -> None:
    """Configure structlog once for the whole session."""
    configure_logging(TEST_LOG_LEVEL)


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Empty in-memory ledger."""
    return InMemoryLedger()


@pytest.fixture
def empty_pool(ledger: InMemoryLedger) -> LiquidityPool:
    """Pool with no reserves; owner is funded and has approved the pool."""
    _, pool = make_pool(ledger=ledger)
    return pool


@pytest.fixture
def pool(ledger: InMemoryLedger) -> LiquidityPool:
    """Active pool at parity (100e18, 100e18) with a funded trader."""
    _, pool = make_pool(INITIAL_RESERVE, INITIAL_RESERVE, ledger=ledger)
    fund(ledger, TRADER)
    return pool
