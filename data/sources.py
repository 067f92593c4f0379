"""
External data-source stubs
===========================
Two fake financial institutions that stand in for real provider feeds:

  Bank A        – 2 customers, 20 card debits each over the last 30 days
  Credit Union  – 2 customers, 15 card debits each over the last 45 days,
                  plus a fixed salary credit 15 days ago

Every call sleeps for a provider-specific, purely cosmetic delay (scaled by
`latency_scale`; 0 disables it). A customer's transactions are generated once
per source instance and copies are handed out afterwards, so identifiers stay
stable across calls. Pass `seed` for reproducible output.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from faker import Faker

from db.exceptions import ConfigurationError
from db.models import (
    Account, AccountStatus, AccountType, Customer, CustomerStatus, Transaction,
    TransactionCategory, TransactionStatus, TransactionType, to_naive_utc, utcnow,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LatencyProfile:
    health: float
    customers: float
    accounts: float
    transactions: float


class DataSource(ABC):
    """Interface shared by every provider feed."""

    name: str = ""
    latency = LatencyProfile(0.0, 0.0, 0.0, 0.0)

    # Generation parameters
    merchants: tuple[str, ...] = ()
    transactions_per_customer = 0
    min_amount = 0.0
    max_amount = 0.0
    window_days = 30
    reference_prefix = ""

    def __init__(self, seed: Optional[int] = None, latency_scale: float = 1.0):
        self.healthy = True
        self.latency_scale = latency_scale
        self._fake = Faker()
        if seed is not None:
            self._fake.seed_instance(seed)
        self._anchor = utcnow()
        self._generated: dict[str, list[Transaction]] = {}

    # ── fixed dataset ────────────────────────────────────────────

    @abstractmethod
    def _customers(self) -> list[Customer]:
        ...

    @abstractmethod
    def _accounts(self) -> dict[str, list[Account]]:
        """customer id → accounts owned at this provider"""

    def _extra_transactions(self, customer_id: str, account_id: str) -> list[Transaction]:
        return []

    # ── helpers ──────────────────────────────────────────────────

    async def _delay(self, seconds: float) -> None:
        if self.latency_scale > 0:
            await asyncio.sleep(seconds * self.latency_scale)

    def _generate(self, customer_id: str, account_id: str) -> list[Transaction]:
        rng = self._fake.random
        base_date = self._anchor - timedelta(days=self.window_days)
        txns = []
        for i in range(self.transactions_per_customer):
            merchant = rng.choice(self.merchants)
            amount = Decimal(str(round(rng.uniform(self.min_amount, self.max_amount), 2)))
            txns.append(Transaction(
                id=self._fake.uuid4(),
                customer_id=customer_id,
                account_id=account_id,
                amount=-amount,
                currency="USD",
                transaction_date=base_date + timedelta(days=rng.randrange(self.window_days)),
                description=f"Purchase at {merchant}",
                merchant_name=merchant,
                type=TransactionType.DEBIT,
                category=TransactionCategory.UNKNOWN,
                status=TransactionStatus.COMPLETED,
                reference_number=f"{self.reference_prefix}{self._fake.numerify('##########')}{i:03d}",
                data_source=self.name,
                created_at=self._anchor,
                updated_at=self._anchor,
            ))
        return txns + self._extra_transactions(customer_id, account_id)

    def _history(self, customer_id: str) -> list[Transaction]:
        if customer_id not in self._generated:
            owned = self._accounts().get(customer_id)
            if not owned:
                return []
            self._generated[customer_id] = self._generate(customer_id, owned[0].id)
        return self._generated[customer_id]

    # ── public API ───────────────────────────────────────────────

    async def check_health(self) -> bool:
        await self._delay(self.latency.health)
        logger.info("Health check for %s: %s", self.name, "OK" if self.healthy else "DOWN")
        return self.healthy

    async def list_customers(self) -> list[Customer]:
        await self._delay(self.latency.customers)
        customers = self._customers()
        logger.info("%s returned %d customers", self.name, len(customers))
        return customers

    async def list_accounts(self, customer_id: str) -> list[Account]:
        await self._delay(self.latency.accounts)
        return self._accounts().get(customer_id, [])

    async def list_transactions(
        self,
        customer_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> list[Transaction]:
        await self._delay(self.latency.transactions)
        start_date, end_date = to_naive_utc(start_date), to_naive_utc(end_date)
        txns = [t.model_copy(deep=True) for t in self._history(customer_id)]
        if start_date is not None:
            txns = [t for t in txns if t.transaction_date >= start_date]
        if end_date is not None:
            txns = [t for t in txns if t.transaction_date <= end_date]
        logger.info("%s returned %d transactions for %s", self.name, len(txns), customer_id)
        return txns

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} healthy={self.healthy}>"


def _customer(cid: str, first: str, last: str, phone: str, dob: date,
              months: int, now: datetime) -> Customer:
    return Customer(
        id=cid, first_name=first, last_name=last,
        email=f"{first.lower()}.{last.lower()}@example.com",
        phone_number=phone, date_of_birth=dob, status=CustomerStatus.ACTIVE,
        created_at=now - timedelta(days=30 * months), updated_at=now,
    )


def _account(aid: str, cid: str, number: str, name: str, acct_type: AccountType,
             balance: str, months: int, now: datetime) -> Account:
    return Account(
        id=aid, customer_id=cid, account_number=number, account_name=name,
        type=acct_type, currency="USD",
        balance=Decimal(balance), available_balance=Decimal(balance),
        status=AccountStatus.ACTIVE, opened_date=now - timedelta(days=30 * months),
        created_at=now, updated_at=now,
    )


class BankADataSource(DataSource):
    name = "Bank A"
    latency = LatencyProfile(health=0.10, customers=0.20, accounts=0.15, transactions=0.30)

    merchants = (
        "Starbucks Coffee", "Shell Gas Station", "Amazon.com", "Walmart Supercenter",
        "McDonald's", "Target Store", "Netflix Subscription", "Uber Technologies",
        "CVS Pharmacy", "AT&T Mobility",
    )
    transactions_per_customer = 20
    min_amount = 10.0
    max_amount = 210.0
    window_days = 30
    reference_prefix = "BANKA"

    def _customers(self) -> list[Customer]:
        now = self._anchor
        return [
            _customer("BANKA_CUST001", "Alice", "Wilson", "+1234567893", date(1982, 3, 10), 6, now),
            _customer("BANKA_CUST002", "Bob", "Brown", "+1234567894", date(1975, 11, 25), 12, now),
        ]

    def _accounts(self) -> dict[str, list[Account]]:
        now = self._anchor
        return {
            "BANKA_CUST001": [_account("BANKA_ACC001", "BANKA_CUST001", "3001234567",
                                       "Alice Wilson Checking", AccountType.CHECKING,
                                       "4200.75", 6, now)],
            "BANKA_CUST002": [_account("BANKA_ACC002", "BANKA_CUST002", "3001234568",
                                       "Bob Brown Business", AccountType.BUSINESS,
                                       "15600.00", 12, now)],
        }


class CreditUnionDataSource(DataSource):
    name = "Credit Union"
    latency = LatencyProfile(health=0.05, customers=0.15, accounts=0.10, transactions=0.25)

    merchants = (
        "Local Coffee Shop", "City Gas Station", "Online Retailer", "Grocery Store",
        "Fast Food Restaurant", "Department Store", "Streaming Service", "Ride Share",
        "Pharmacy Chain", "Telecom Provider", "Fitness Center", "Bookstore",
    )
    transactions_per_customer = 15
    min_amount = 5.0
    max_amount = 155.0
    window_days = 45
    reference_prefix = "CU"

    SALARY_AMOUNT = Decimal("3500.00")
    SALARY_DAYS_AGO = 15

    def _customers(self) -> list[Customer]:
        now = self._anchor
        return [
            _customer("CU_CUST001", "Sarah", "Connor", "+1234567895", date(1980, 7, 12), 18, now),
            _customer("CU_CUST002", "David", "Miller", "+1234567896", date(1992, 2, 28), 24, now),
        ]

    def _accounts(self) -> dict[str, list[Account]]:
        now = self._anchor
        return {
            "CU_CUST001": [_account("CU_ACC001", "CU_CUST001", "5001234567",
                                    "Sarah Connor Savings", AccountType.SAVINGS,
                                    "7800.50", 18, now)],
            "CU_CUST002": [_account("CU_ACC002", "CU_CUST002", "5001234568",
                                    "David Miller Checking", AccountType.CHECKING,
                                    "2150.75", 24, now)],
        }

    def _extra_transactions(self, customer_id: str, account_id: str) -> list[Transaction]:
        return [Transaction(
            id=self._fake.uuid4(),
            customer_id=customer_id,
            account_id=account_id,
            amount=self.SALARY_AMOUNT,
            currency="USD",
            transaction_date=self._anchor - timedelta(days=self.SALARY_DAYS_AGO),
            description="Direct Deposit - Salary",
            merchant_name="Employer Inc",
            type=TransactionType.CREDIT,
            category=TransactionCategory.UNKNOWN,
            status=TransactionStatus.COMPLETED,
            reference_number=f"CU_DD{self._fake.numerify('##########')}",
            data_source=self.name,
            created_at=self._anchor,
            updated_at=self._anchor,
        )]


DATA_SOURCE_REGISTRY: dict[str, type[DataSource]] = {
    "bank_a": BankADataSource,
    "credit_union": CreditUnionDataSource,
}


def build_data_sources(
    names: list[str],
    seed: Optional[int] = None,
    latency_scale: float = 1.0,
) -> list[DataSource]:
    """Instantiate the configured sources in the given order."""
    unknown = [n for n in names if n not in DATA_SOURCE_REGISTRY]
    if unknown:
        raise ConfigurationError(
            f"Unknown data source(s): {', '.join(unknown)}. "
            f"Valid names: {', '.join(DATA_SOURCE_REGISTRY)}"
        )
    sources = []
    for i, name in enumerate(names):
        # Offset the seed so each source draws its own sequence
        source_seed = seed + i if seed is not None else None
        sources.append(DATA_SOURCE_REGISTRY[name](seed=source_seed, latency_scale=latency_scale))
    return sources
