"""
Keyword rules for transaction categorization.

Rules are evaluated top to bottom against the lower-cased
"<description> <merchant name>" text; the first rule with a keyword that
appears anywhere in the text wins (plain substring match, no word
boundaries). INCOME additionally requires a strictly positive amount.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from db.models import TransactionCategory


@dataclass(frozen=True)
class CategoryRule:
    category: TransactionCategory
    keywords: tuple[str, ...]
    requires_positive_amount: bool = False

    def matches(self, text: str, amount: Optional[Decimal]) -> bool:
        if self.requires_positive_amount and not (amount is not None and amount > 0):
            return False
        return any(keyword in text for keyword in self.keywords)


CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(TransactionCategory.FOOD, (
        "restaurant", "cafe", "food", "pizza", "burger", "starbucks", "mcdonalds",
        "subway", "grocery", "supermarket", "walmart", "kroger",
    )),
    CategoryRule(TransactionCategory.TRANSPORTATION, (
        "uber", "lyft", "taxi", "gas", "fuel", "exxon", "shell", "chevron", "bp",
        "parking", "metro", "bus", "train", "airline",
    )),
    CategoryRule(TransactionCategory.ENTERTAINMENT, (
        "netflix", "spotify", "movie", "cinema", "theater", "concert", "game",
        "steam", "playstation", "xbox",
    )),
    CategoryRule(TransactionCategory.SHOPPING, (
        "amazon", "ebay", "target", "bestbuy", "mall", "store", "shop", "clothing",
        "fashion",
    )),
    CategoryRule(TransactionCategory.BILLS, (
        "electric", "electricity", "water", "gas bill", "phone", "internet", "cable",
        "utility", "bill", "payment",
    )),
    CategoryRule(TransactionCategory.HEALTHCARE, (
        "hospital", "doctor", "pharmacy", "cvs", "walgreens", "medical", "health",
        "clinic",
    )),
    CategoryRule(TransactionCategory.EDUCATION, (
        "school", "university", "college", "tuition", "education", "book", "student",
    )),
    CategoryRule(TransactionCategory.TRAVEL, (
        "hotel", "airbnb", "booking", "expedia", "travel", "vacation", "flight",
    )),
    CategoryRule(TransactionCategory.INVESTMENT, (
        "investment", "stock", "bond", "mutual fund", "etf", "dividend", "broker",
    )),
    CategoryRule(TransactionCategory.INCOME, (
        "salary", "payroll", "wage", "deposit", "income", "bonus",
    ), requires_positive_amount=True),
    CategoryRule(TransactionCategory.TRANSFER, (
        "transfer", "wire", "ach", "p2p", "venmo", "paypal", "zelle",
    )),
    CategoryRule(TransactionCategory.FEE, (
        "fee", "charge", "overdraft", "atm", "service charge", "maintenance",
    )),
    CategoryRule(TransactionCategory.INSURANCE, (
        "insurance", "premium", "auto insurance", "health insurance", "life insurance",
    )),
    CategoryRule(TransactionCategory.CHARITY, (
        "donation", "charity", "church", "foundation", "nonprofit",
    )),
)

FALLBACK_CATEGORY = TransactionCategory.OTHER
