"""Pytest configuration and fixtures."""

import itertools
from datetime import date
from decimal import Decimal
from typing import Any, Callable

import pytest

from financing_core.clock import FixedClock
from financing_core.persistence import InMemoryFinancingStore
from financing_core.store import FinancingLedger


@pytest.fixture
def today() -> date:
    """Fixed 'today' for deterministic status refresh."""
    return date(2024, 6, 15)


@pytest.fixture
def clock(today: date) -> FixedClock:
    return FixedClock(today)


@pytest.fixture
def store() -> InMemoryFinancingStore:
    """Fresh in-memory store for each test."""
    return InMemoryFinancingStore()


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Sequential financing ids."""
    counter = itertools.count(1)
    return lambda: f"fin-test-{next(counter):03d}"


@pytest.fixture
def ledger(
    store: InMemoryFinancingStore,
    clock: FixedClock,
    id_factory: Callable[[], str],
) -> FinancingLedger:
    return FinancingLedger(store, clock=clock, id_factory=id_factory)


@pytest.fixture
def price_payload() -> dict[str, Any]:
    """1000 at 12% a year over 12 months, PRICE."""
    return {
        "name": "Carro",
        "loan_type": "vehicle",
        "principal": Decimal("1000"),
        "annual_rate": Decimal("12"),
        "term_months": 12,
        "system": "PRICE",
        "start_date": "2024-01-15",
    }


@pytest.fixture
def sac_payload(price_payload: dict[str, Any]) -> dict[str, Any]:
    """Same terms as ``price_payload`` under SAC."""
    return {**price_payload, "name": "Casa", "loan_type": "house", "system": "SAC"}


@pytest.fixture
def seed() -> int:
    """Random seed for reproducible generators."""
    return 42
