"""
Transaction categorizer.

    categorize(transaction)              → one TransactionCategory
    categorize_text(description, merchant, amount)
    categorize_transactions(transactions) → same list, category written back
"""
import logging
from decimal import Decimal
from typing import Iterable, Optional, Protocol

from categorization.rules import CATEGORY_RULES, FALLBACK_CATEGORY, CategoryRule
from db.models import Transaction, TransactionCategory

logger = logging.getLogger(__name__)


class Categorizable(Protocol):
    description: str
    merchant_name: str
    amount: Decimal


def categorize_text(
    description: Optional[str],
    merchant_name: Optional[str],
    amount: Optional[Decimal] = None,
    rules: Iterable[CategoryRule] = CATEGORY_RULES,
) -> TransactionCategory:
    text = f"{(description or '').lower()} {(merchant_name or '').lower()}"
    for rule in rules:
        if rule.matches(text, amount):
            return rule.category
    return FALLBACK_CATEGORY


def categorize(transaction: Categorizable) -> TransactionCategory:
    category = categorize_text(transaction.description, transaction.merchant_name, transaction.amount)
    logger.debug("Transaction %s categorized as %s",
                 getattr(transaction, "id", "<new>"), category.value)
    return category


def categorize_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Categorize each transaction in place; output order matches input order."""
    result = []
    for txn in transactions:
        txn.category = categorize(txn)
        result.append(txn)
    logger.info("Categorized %d transactions", len(result))
    return result
