"""Tests for the keyword categorizer."""
from decimal import Decimal

from categorization.engine import categorize, categorize_text, categorize_transactions
from categorization.rules import CATEGORY_RULES, FALLBACK_CATEGORY, CategoryRule
from db.models import TransactionCategory


class TestCategorizeText:
    """Single-text categorization."""

    def test_starbucks_example(self) -> None:
        assert categorize_text("Purchase at Starbucks Coffee", "Starbucks Coffee",
                               Decimal("-4.50")) == TransactionCategory.FOOD

    def test_amazon_is_shopping(self) -> None:
        assert categorize_text("Amazon.com order", "Amazon.com",
                               Decimal("-25.00")) == TransactionCategory.SHOPPING

    def test_fee_substring_matches(self) -> None:
        assert categorize_text("XYZ Corp Widget Fee", "", Decimal("-2.00")) == TransactionCategory.FEE

    def test_positive_grocery_is_still_food(self) -> None:
        assert categorize_text("Grocery refund deposit", "", Decimal("40.00")) == TransactionCategory.FOOD

    def test_ride_share_is_transportation(self) -> None:
        assert categorize_text("Ride", "Uber Technologies",
                               Decimal("-18.00")) == TransactionCategory.TRANSPORTATION

    def test_positive_salary_is_income(self) -> None:
        assert categorize_text("Direct Deposit - Salary", "Employer Inc",
                               Decimal("3500.00")) == TransactionCategory.INCOME

    def test_negative_salary_is_not_income(self) -> None:
        assert categorize_text("Salary", "", Decimal("-3500.00")) == TransactionCategory.OTHER

    def test_zero_amount_is_not_income(self) -> None:
        assert categorize_text("Bonus", "", Decimal("0")) == TransactionCategory.OTHER

    def test_missing_amount_is_not_income(self) -> None:
        assert categorize_text("Payroll", "Acme", None) == TransactionCategory.OTHER

    def test_no_match_falls_back_to_other(self) -> None:
        assert categorize_text("Misc", "Unknown Vendor",
                               Decimal("-10.00")) == TransactionCategory.OTHER

    def test_empty_text_falls_back_to_other(self) -> None:
        assert categorize_text(None, None, Decimal("-1.00")) == FALLBACK_CATEGORY

    def test_case_insensitive(self) -> None:
        assert categorize_text("NETFLIX MONTHLY", "", Decimal("-15.99")) == \
            TransactionCategory.ENTERTAINMENT

    def test_earlier_rule_wins(self) -> None:
        # "food" (FOOD) precedes "deposit" (INCOME)
        assert categorize_text("Food deposit", "", Decimal("100.00")) == TransactionCategory.FOOD

    def test_substring_match_without_word_boundaries(self) -> None:
        # "coffee" contains "fee" but no earlier rule matches "coffee" on its own
        assert categorize_text("coffee", "", Decimal("-3.00")) == TransactionCategory.FEE

    def test_merchant_name_is_searched(self) -> None:
        assert categorize_text("Card purchase", "CVS Pharmacy",
                               Decimal("-12.00")) == TransactionCategory.HEALTHCARE

    def test_custom_rules(self) -> None:
        rules = (CategoryRule(TransactionCategory.CHARITY, ("widget",)),)
        assert categorize_text("Widget Co", "", Decimal("-1"), rules=rules) == \
            TransactionCategory.CHARITY


class TestCategoryRules:
    """Rule table ordering and shape."""

    def test_rule_order(self) -> None:
        assert [r.category for r in CATEGORY_RULES] == [
            TransactionCategory.FOOD,
            TransactionCategory.TRANSPORTATION,
            TransactionCategory.ENTERTAINMENT,
            TransactionCategory.SHOPPING,
            TransactionCategory.BILLS,
            TransactionCategory.HEALTHCARE,
            TransactionCategory.EDUCATION,
            TransactionCategory.TRAVEL,
            TransactionCategory.INVESTMENT,
            TransactionCategory.INCOME,
            TransactionCategory.TRANSFER,
            TransactionCategory.FEE,
            TransactionCategory.INSURANCE,
            TransactionCategory.CHARITY,
        ]

    def test_only_income_requires_positive_amount(self) -> None:
        gated = [r.category for r in CATEGORY_RULES if r.requires_positive_amount]
        assert gated == [TransactionCategory.INCOME]

    def test_keywords_are_lower_case(self) -> None:
        for rule in CATEGORY_RULES:
            assert all(k == k.lower() for k in rule.keywords)


class TestCategorizeTransactions:
    """Batch categorization."""

    def test_categorize_single_transaction(self, make_transaction) -> None:
        txn = make_transaction(description="Purchase at Shell", merchant_name="Shell Gas Station")
        assert categorize(txn) == TransactionCategory.TRANSPORTATION

    def test_batch_writes_category_and_keeps_order(self, make_transaction) -> None:
        txns = [
            make_transaction(description="Netflix", merchant_name=""),
            make_transaction(description="Salary", merchant_name="", amount=Decimal("1000")),
            make_transaction(description="Something", merchant_name="Nobody"),
        ]
        ids = [t.id for t in txns]

        result = categorize_transactions(txns)

        assert [t.id for t in result] == ids
        assert [t.category for t in result] == [
            TransactionCategory.ENTERTAINMENT,
            TransactionCategory.INCOME,
            TransactionCategory.OTHER,
        ]

    def test_batch_empty(self) -> None:
        assert categorize_transactions([]) == []

    def test_overwrites_existing_category(self, make_transaction) -> None:
        txn = make_transaction(description="Hotel stay", merchant_name="",
                               category=TransactionCategory.FOOD)
        categorize_transactions([txn])
        assert txn.category == TransactionCategory.TRAVEL
