"""Pytest configuration and fixtures."""
from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from config.settings import Settings
from data.sources import BankADataSource, CreditUnionDataSource
from db.models import Transaction, TransactionType, utcnow
from db.store import build_stores


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 7


@pytest.fixture
def bank_a(seed) -> BankADataSource:
    return BankADataSource(seed=seed, latency_scale=0)


@pytest.fixture
def credit_union(seed) -> CreditUnionDataSource:
    return CreditUnionDataSource(seed=seed + 1, latency_scale=0)


@pytest.fixture
def stores():
    """Empty stores, strict about missing ids."""
    return build_stores(seed_sample_data=False)


@pytest.fixture
def lenient_stores():
    return build_stores(strict_not_found=False, seed_sample_data=False)


@pytest.fixture
def seeded_stores():
    return build_stores(seed_sample_data=True, sample_data_seed=42)


@pytest.fixture
def make_transaction():
    """Factory for transactions with sensible defaults."""

    def _make(**overrides) -> Transaction:
        fields = {
            "customer_id": "CUST001",
            "account_id": "ACC001",
            "amount": Decimal("-25.50"),
            "transaction_date": utcnow() - timedelta(days=1),
            "description": "Purchase at Corner Shop",
            "merchant_name": "Corner Shop",
            "type": TransactionType.DEBIT,
            "data_source": "Test",
        }
        fields.update(overrides)
        return Transaction(**fields)

    return _make


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        DATA_SOURCE_SEED=7,
        SIMULATE_LATENCY=False,
        SEED_SAMPLE_DATA=True,
        SAMPLE_DATA_SEED=42,
        STRICT_NOT_FOUND=True,
        SUMMARY_CACHE_TTL=60,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def client(test_settings):
    with TestClient(create_app(test_settings)) as test_client:
        yield test_client


@pytest.fixture
def empty_client():
    """Client over stores that start without sample rows."""
    settings = Settings(
        DATA_SOURCE_SEED=7,
        SIMULATE_LATENCY=False,
        SEED_SAMPLE_DATA=False,
        LOG_LEVEL="WARNING",
    )
    with TestClient(create_app(settings)) as test_client:
        yield test_client
