"""Shared fixtures for the FinSight tests."""

from datetime import datetime

import pytest

from finsight.config import get_settings
from finsight.models import Transaction, TransactionType
from finsight.services.storage import InMemoryStorage


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_transaction():
    """Build a Transaction with sensible defaults for anything not given."""
    counter = {"n": 0}

    def _make(type_="income", amount=100.0, category="General", date=None, **extra):
        counter["n"] += 1
        return Transaction(
            id=extra.pop("id", f"t{counter['n']}"),
            type=TransactionType(type_),
            amount=amount,
            category=category,
            date=date or datetime(2024, 1, 1),
            **extra,
        )

    return _make


@pytest.fixture
def storage():
    return InMemoryStorage()
