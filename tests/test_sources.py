"""Tests for the stub data sources."""
from datetime import timedelta
from decimal import Decimal

import pytest

from data.sources import (
    DATA_SOURCE_REGISTRY, BankADataSource, CreditUnionDataSource, build_data_sources,
)
from db.exceptions import ConfigurationError
from db.models import TransactionCategory, TransactionStatus, TransactionType, utcnow


class TestBankA:
    """Bank A stub."""

    async def test_health(self, bank_a) -> None:
        assert await bank_a.check_health() is True
        bank_a.healthy = False
        assert await bank_a.check_health() is False

    async def test_customers(self, bank_a) -> None:
        customers = await bank_a.list_customers()
        assert [c.id for c in customers] == ["BANKA_CUST001", "BANKA_CUST002"]
        assert customers[0].full_name == "Alice Wilson"

    async def test_accounts(self, bank_a) -> None:
        accounts = await bank_a.list_accounts("BANKA_CUST002")
        assert [a.id for a in accounts] == ["BANKA_ACC002"]
        assert accounts[0].balance == Decimal("15600.00")

    async def test_accounts_unknown_customer(self, bank_a) -> None:
        assert await bank_a.list_accounts("NOPE") == []

    async def test_transactions_shape(self, bank_a) -> None:
        txns = await bank_a.list_transactions("BANKA_CUST001")
        assert len(txns) == 20
        window_start = utcnow() - timedelta(days=31)
        for txn in txns:
            assert txn.customer_id == "BANKA_CUST001"
            assert txn.account_id == "BANKA_ACC001"
            assert Decimal("-210") <= txn.amount <= Decimal("-10")
            assert txn.type == TransactionType.DEBIT
            assert txn.status == TransactionStatus.COMPLETED
            assert txn.category == TransactionCategory.UNKNOWN
            assert txn.data_source == "Bank A"
            assert txn.reference_number.startswith("BANKA")
            assert txn.description == f"Purchase at {txn.merchant_name}"
            assert txn.transaction_date >= window_start

    async def test_transactions_unknown_customer(self, bank_a) -> None:
        assert await bank_a.list_transactions("NOPE") == []

    async def test_ids_stable_across_calls(self, bank_a) -> None:
        first = await bank_a.list_transactions("BANKA_CUST002")
        second = await bank_a.list_transactions("BANKA_CUST002")
        assert [t.id for t in first] == [t.id for t in second]
        assert len({t.id for t in first}) == len(first)

    async def test_returns_copies(self, bank_a) -> None:
        first = await bank_a.list_transactions("BANKA_CUST001")
        first[0].category = TransactionCategory.FOOD
        second = await bank_a.list_transactions("BANKA_CUST001")
        assert second[0].category == TransactionCategory.UNKNOWN

    async def test_same_seed_same_output(self) -> None:
        a = await BankADataSource(seed=3, latency_scale=0).list_transactions("BANKA_CUST001")
        b = await BankADataSource(seed=3, latency_scale=0).list_transactions("BANKA_CUST001")
        assert [t.id for t in a] == [t.id for t in b]
        assert [t.amount for t in a] == [t.amount for t in b]

    async def test_date_filter_is_inclusive(self, bank_a) -> None:
        txns = await bank_a.list_transactions("BANKA_CUST001")
        pivot = sorted(t.transaction_date for t in txns)[len(txns) // 2]

        after = await bank_a.list_transactions("BANKA_CUST001", start_date=pivot)
        before = await bank_a.list_transactions("BANKA_CUST001", end_date=pivot)

        assert all(t.transaction_date >= pivot for t in after)
        assert all(t.transaction_date <= pivot for t in before)
        assert any(t.transaction_date == pivot for t in after)
        assert any(t.transaction_date == pivot for t in before)


class TestCreditUnion:
    """Credit Union stub."""

    async def test_customers(self, credit_union) -> None:
        customers = await credit_union.list_customers()
        assert [c.id for c in customers] == ["CU_CUST001", "CU_CUST002"]

    async def test_transactions_include_salary(self, credit_union) -> None:
        txns = await credit_union.list_transactions("CU_CUST001")
        assert len(txns) == 16

        salaries = [t for t in txns if t.type == TransactionType.CREDIT]
        assert len(salaries) == 1
        salary = salaries[0]
        assert salary.amount == Decimal("3500.00")
        assert salary.description == "Direct Deposit - Salary"
        assert salary.merchant_name == "Employer Inc"
        assert salary.reference_number.startswith("CU_DD")
        assert salary.data_source == "Credit Union"
        # categorized only on aggregation
        assert salary.category == TransactionCategory.UNKNOWN

    async def test_debit_amount_range(self, credit_union) -> None:
        txns = await credit_union.list_transactions("CU_CUST002")
        debits = [t for t in txns if t.type == TransactionType.DEBIT]
        assert len(debits) == 15
        assert all(Decimal("-155") <= t.amount <= Decimal("-5") for t in debits)


class TestBuildDataSources:
    """Registry lookup."""

    def test_builds_in_order(self) -> None:
        sources = build_data_sources(["credit_union", "bank_a"], seed=1, latency_scale=0)
        assert [type(s) for s in sources] == [CreditUnionDataSource, BankADataSource]
        assert all(s.latency_scale == 0 for s in sources)

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            build_data_sources(["bank_a", "mystery_bank"])
        assert "mystery_bank" in str(exc_info.value)

    def test_registry_names(self) -> None:
        assert set(DATA_SOURCE_REGISTRY) == {"bank_a", "credit_union"}
