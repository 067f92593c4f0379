"""Summary statistics over stored transactions and accounts."""
from collections import Counter, defaultdict
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from db.models import Account, AccountSummary, Transaction, TransactionSummary, to_naive_utc
from db.store import TransactionStore

CENT = Decimal("0.01")


def summarize_transactions(transactions: Iterable[Transaction]) -> TransactionSummary:
    txns = list(transactions)
    total = sum((t.amount for t in txns), Decimal("0"))
    average = (total / len(txns)).quantize(CENT, rounding=ROUND_HALF_UP) if txns else Decimal("0")

    category_counts: Counter = Counter()
    category_amounts: dict = defaultdict(lambda: Decimal("0"))
    monthly_counts: Counter = Counter()
    monthly_amounts: dict = defaultdict(lambda: Decimal("0"))
    for t in txns:
        month = t.transaction_date.strftime("%Y-%m")
        category_counts[t.category] += 1
        category_amounts[t.category] += t.amount
        monthly_counts[month] += 1
        monthly_amounts[month] += t.amount

    return TransactionSummary(
        total_transactions=len(txns),
        total_amount=total,
        average_amount=average,
        category_counts=dict(category_counts),
        category_amounts=dict(category_amounts),
        monthly_transaction_counts=dict(sorted(monthly_counts.items())),
        monthly_amounts=dict(sorted(monthly_amounts.items())),
    )


async def transaction_summary(
    store: TransactionStore,
    customer_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> TransactionSummary:
    """
    Summary for one customer (or everyone). The date window only applies
    when both ends are given.
    """
    if customer_id:
        txns = await store.list_by_customer(customer_id)
    else:
        txns = await store.list_all()

    if start_date is not None and end_date is not None:
        start, end = to_naive_utc(start_date), to_naive_utc(end_date)
        txns = [t for t in txns if start <= t.transaction_date <= end]

    return summarize_transactions(txns)


def summarize_accounts(accounts: Iterable[Account]) -> AccountSummary:
    accts = list(accounts)
    return AccountSummary(
        total_accounts=len(accts),
        accounts_by_type=dict(Counter(a.type.value for a in accts)),
        accounts_by_status=dict(Counter(a.status.value for a in accts)),
        total_balance=sum((a.balance for a in accts), Decimal("0")),
        total_available_balance=sum((a.available_balance for a in accts), Decimal("0")),
        accounts_by_customer=dict(Counter(a.customer_id for a in accts)),
    )
