"""
In-memory entity stores
========================
One store per collection (customers, accounts, transactions). Each store owns
an ordered list guarded by a single lock that is held only for the duration of
a scan or mutation. Reads hand out deep copies so callers can never mutate the
backing list outside the lock.

The methods are coroutines so the stores can later be swapped for a real
database without touching the callers; none of them actually awaits I/O.

Update/delete of a missing id follows `strict_not_found`:
  True  → raise EntityNotFoundError
  False → update returns None, delete returns False
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from db.exceptions import DuplicateEntityError, EntityNotFoundError
from db.models import (
    Account, AccountType, Customer, Transaction, TransactionCategory,
    new_id, to_naive_utc, utcnow,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", Customer, Account, Transaction)


class EntityStore(Generic[T]):
    entity_name = "Entity"

    def __init__(self, items: Iterable[T] = (), strict_not_found: bool = True):
        self._items: list[T] = []
        self._lock = threading.Lock()
        self.strict_not_found = strict_not_found
        for item in items:
            self._insert(item)

    # ── internals (caller holds the lock, or is __init__) ───────

    def _index_of(self, entity_id: str) -> Optional[int]:
        for i, item in enumerate(self._items):
            if item.id == entity_id:
                return i
        return None

    def _prepare(self, item: T) -> T:
        now = utcnow()
        if item.created_at is None:
            item.created_at = now
        if item.updated_at is None:
            item.updated_at = now
        return item

    def _insert(self, item: T) -> T:
        item = self._prepare(item.model_copy(deep=True))
        if self._index_of(item.id) is not None:
            raise DuplicateEntityError(self.entity_name, item.id)
        self._items.append(item)
        return item

    def _order(self, items: list[T]) -> list[T]:
        return items

    def _select(self, predicate: Callable[[T], bool]) -> list[T]:
        with self._lock:
            matched = [item.model_copy(deep=True) for item in self._items if predicate(item)]
        return self._order(matched)

    def _missing(self, entity_id: str):
        if self.strict_not_found:
            raise EntityNotFoundError(self.entity_name, entity_id)
        logger.debug("%s %s not found; ignoring", self.entity_name, entity_id)

    # ── public API ─────────────────────────────────────────────

    async def list_all(self) -> list[T]:
        return self._select(lambda _: True)

    async def get_by_id(self, entity_id: str) -> Optional[T]:
        with self._lock:
            idx = self._index_of(entity_id)
            return self._items[idx].model_copy(deep=True) if idx is not None else None

    async def create(self, item: T) -> T:
        with self._lock:
            stored = self._insert(item)
        logger.debug("Created %s %s", self.entity_name, stored.id)
        return stored.model_copy(deep=True)

    async def update(self, entity_id: str, changes: dict[str, Any]) -> Optional[T]:
        with self._lock:
            idx = self._index_of(entity_id)
            if idx is None:
                self._missing(entity_id)
                return None
            changes = {k: v for k, v in changes.items() if k not in ("id", "created_at")}
            updated = self._items[idx].model_copy(update={**changes, "updated_at": utcnow()})
            self._items[idx] = updated
        logger.debug("Updated %s %s: %s", self.entity_name, entity_id, sorted(changes))
        return updated.model_copy(deep=True)

    async def delete(self, entity_id: str) -> bool:
        with self._lock:
            idx = self._index_of(entity_id)
            if idx is None:
                self._missing(entity_id)
                return False
            del self._items[idx]
        logger.debug("Deleted %s %s", self.entity_name, entity_id)
        return True

    async def count(self) -> int:
        with self._lock:
            return len(self._items)


class _SequentialIdMixin:
    id_prefix = ""

    def _next_id(self) -> str:
        used = {item.id for item in self._items}
        n = len(self._items) + 1
        while f"{self.id_prefix}{n:03d}" in used:
            n += 1
        return f"{self.id_prefix}{n:03d}"


class CustomerStore(_SequentialIdMixin, EntityStore[Customer]):
    entity_name = "Customer"
    id_prefix = "CUST"

    def _prepare(self, item: Customer) -> Customer:
        if not item.id:
            item.id = self._next_id()
        return super()._prepare(item)

    async def get_by_email(self, email: str) -> Optional[Customer]:
        wanted = email.lower()
        found = self._select(lambda c: c.email.lower() == wanted)
        return found[0] if found else None


class AccountStore(_SequentialIdMixin, EntityStore[Account]):
    entity_name = "Account"
    id_prefix = "ACC"

    def _prepare(self, item: Account) -> Account:
        if not item.id:
            item.id = self._next_id()
        if not item.account_number:
            item.account_number = f"100{len(self._items) + 1:07d}"
        if item.opened_date is None:
            item.opened_date = utcnow()
        return super()._prepare(item)

    async def list_by_customer(self, customer_id: str) -> list[Account]:
        return self._select(lambda a: a.customer_id == customer_id)

    async def list_by_type(self, account_type: AccountType) -> list[Account]:
        return self._select(lambda a: a.type == account_type)


class TransactionStore(EntityStore[Transaction]):
    entity_name = "Transaction"

    def _prepare(self, item: Transaction) -> Transaction:
        if not item.id:
            item.id = new_id()
        return super()._prepare(item)

    def _order(self, items: list[Transaction]) -> list[Transaction]:
        return sorted(items, key=lambda t: t.transaction_date, reverse=True)

    async def add_if_absent(self, transaction: Transaction) -> bool:
        """Insert unless a transaction with the same id is already stored."""
        with self._lock:
            if self._index_of(transaction.id) is not None:
                return False
            self._insert(transaction)
        return True

    async def list_by_customer(self, customer_id: str) -> list[Transaction]:
        return self._select(lambda t: t.customer_id == customer_id)

    async def list_by_account(self, account_id: str) -> list[Transaction]:
        return self._select(lambda t: t.account_id == account_id)

    async def list_by_date_range(self, start: datetime, end: datetime) -> list[Transaction]:
        start, end = to_naive_utc(start), to_naive_utc(end)
        return self._select(lambda t: start <= t.transaction_date <= end)

    async def list_by_category(self, category: TransactionCategory) -> list[Transaction]:
        return self._select(lambda t: t.category == category)

    async def list_by_source(self, data_source: str) -> list[Transaction]:
        return self._select(lambda t: t.data_source == data_source)

    async def total_amount(
        self,
        customer_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Decimal:
        start, end = to_naive_utc(start), to_naive_utc(end)

        def matches(t: Transaction) -> bool:
            if customer_id and t.customer_id != customer_id:
                return False
            if start is not None and t.transaction_date < start:
                return False
            if end is not None and t.transaction_date > end:
                return False
            return True

        return sum((t.amount for t in self._select(matches)), Decimal("0"))


@dataclass
class Stores:
    customers: CustomerStore
    accounts: AccountStore
    transactions: TransactionStore


def build_stores(
    strict_not_found: bool = True,
    seed_sample_data: bool = True,
    sample_data_seed: int = 42,
) -> Stores:
    """Construct the three stores, optionally pre-seeded with the sample rows."""
    customers: list[Customer] = []
    accounts: list[Account] = []
    transactions: list[Transaction] = []
    if seed_sample_data:
        from data.generator import SampleDataGenerator
        gen = SampleDataGenerator(seed=sample_data_seed)
        customers, accounts, transactions = gen.customers(), gen.accounts(), gen.transactions()

    stores = Stores(
        customers=CustomerStore(customers, strict_not_found=strict_not_found),
        accounts=AccountStore(accounts, strict_not_found=strict_not_found),
        transactions=TransactionStore(transactions, strict_not_found=strict_not_found),
    )
    logger.info(
        "Stores ready: %d customers, %d accounts, %d transactions",
        len(customers), len(accounts), len(transactions),
    )
    return stores
