"""
Sample Data Generator
======================
Builds the fixed rows the stores are seeded with at start-up:

  - 3 customers (CUST001–CUST003)
  - 9 accounts, three per customer (checking / savings / credit / investment /
    business / loan)
  - 120 card purchases spread evenly over the customers across the last
    90 days, plus fixed income credits (salaries, business revenue)

Everything random is drawn from one seeded generator, so the same seed always
produces the same rows (dates are relative to the moment of generation).
"""
import random
from datetime import date, datetime, timedelta
from decimal import Decimal

from faker import Faker

from db.models import (
    Account, AccountStatus, AccountType, Customer, CustomerStatus, Transaction,
    TransactionCategory, TransactionStatus, TransactionType, utcnow,
)

# ──────────────────────────────────────────────────────────────────
# Reference data
# ──────────────────────────────────────────────────────────────────

CUSTOMERS = [
    # id, first, last, email, phone, dob, months since onboarding
    ("CUST001", "John", "Doe", "john.doe@example.com", "+1234567890", date(1985, 5, 15), 24),
    ("CUST002", "Jane", "Smith", "jane.smith@example.com", "+1234567891", date(1990, 8, 22), 8),
    ("CUST003", "Mike", "Johnson", "mike.johnson@example.com", "+1234567892", date(1978, 12, 3), 14),
]

ACCOUNTS = [
    # id, customer, number, name, type, balance, available, months open
    ("ACC001", "CUST001", "1001234567", "John Doe Checking", AccountType.CHECKING, "5500.00", "5500.00", 24),
    ("ACC002", "CUST001", "2001234567", "John Doe Savings", AccountType.SAVINGS, "12000.00", "12000.00", 12),
    ("ACC005", "CUST001", "3001234567", "John Doe Credit Card", AccountType.CREDIT, "-1250.75", "3749.25", 18),
    ("ACC003", "CUST002", "1001234568", "Jane Smith Checking", AccountType.CHECKING, "3200.50", "3200.50", 8),
    ("ACC006", "CUST002", "2001234568", "Jane Smith Savings", AccountType.SAVINGS, "7500.25", "7500.25", 6),
    ("ACC007", "CUST002", "4001234568", "Jane Smith Investment", AccountType.INVESTMENT, "15000.00", "15000.00", 4),
    ("ACC004", "CUST003", "1001234569", "Mike Johnson Business Checking", AccountType.BUSINESS, "8750.25", "8750.25", 14),
    ("ACC008", "CUST003", "2001234569", "Mike Johnson Business Savings", AccountType.SAVINGS, "25000.00", "25000.00", 12),
    ("ACC009", "CUST003", "5001234569", "Mike Johnson Business Loan", AccountType.LOAN, "-45000.00", "0.00", 10),
]

MERCHANTS = [
    ("Starbucks Coffee", TransactionCategory.FOOD),
    ("Shell Gas Station", TransactionCategory.TRANSPORTATION),
    ("Amazon.com", TransactionCategory.SHOPPING),
    ("Walmart Supercenter", TransactionCategory.SHOPPING),
    ("McDonald's", TransactionCategory.FOOD),
    ("Target Store", TransactionCategory.SHOPPING),
    ("Netflix Subscription", TransactionCategory.ENTERTAINMENT),
    ("Uber Technologies", TransactionCategory.TRANSPORTATION),
    ("CVS Pharmacy", TransactionCategory.HEALTHCARE),
    ("AT&T Mobility", TransactionCategory.BILLS),
    ("Electric Company", TransactionCategory.BILLS),
    ("Whole Foods Market", TransactionCategory.FOOD),
    ("Exxon Mobile", TransactionCategory.TRANSPORTATION),
    ("Apple Store", TransactionCategory.SHOPPING),
    ("Spotify Premium", TransactionCategory.ENTERTAINMENT),
    ("Doctor's Office", TransactionCategory.HEALTHCARE),
    ("University Tuition", TransactionCategory.EDUCATION),
    ("Hotel Marriott", TransactionCategory.TRAVEL),
    ("Delta Airlines", TransactionCategory.TRAVEL),
    ("Gym Membership", TransactionCategory.HEALTHCARE),
]

CREDIT_CARD_ACCOUNT = "ACC005"
LOAN_ACCOUNT = "ACC009"
HISTORY_DAYS = 90
PURCHASE_COUNT = 120

INCOME_CREDITS = [
    # customer, account, amount, days ago, description, merchant, source, ref suffix
    ("CUST001", "ACC001", "4500.00", 30, "Salary Deposit - Tech Corp", "Tech Corp Inc.", "BankA", "SAL1"),
    ("CUST002", "ACC003", "3800.00", 15, "Salary Deposit - Marketing LLC", "Marketing LLC", "CreditUnion", "SAL2"),
    ("CUST003", "ACC004", "8750.00", 7, "Business Revenue - Client Payment", "ABC Corporation", "BankA", "BUS1"),
]
PAYROLL_AMOUNT = "5000.00"


def _months_ago(now: datetime, months: int) -> datetime:
    return now - timedelta(days=30 * months)


class SampleDataGenerator:
    def __init__(self, seed: int = 42):
        self.seed = seed
        self._now = utcnow()

    def customers(self) -> list[Customer]:
        return [
            Customer(
                id=cid, first_name=first, last_name=last, email=email,
                phone_number=phone, date_of_birth=dob,
                status=CustomerStatus.ACTIVE,
                created_at=_months_ago(self._now, months), updated_at=self._now,
            )
            for cid, first, last, email, phone, dob, months in CUSTOMERS
        ]

    def accounts(self) -> list[Account]:
        result = []
        for aid, cid, number, name, acct_type, balance, available, months in ACCOUNTS:
            opened = _months_ago(self._now, months)
            result.append(Account(
                id=aid, customer_id=cid, account_number=number, account_name=name,
                type=acct_type, currency="USD",
                balance=Decimal(balance), available_balance=Decimal(available),
                status=AccountStatus.ACTIVE, opened_date=opened,
                created_at=opened, updated_at=self._now,
            ))
        return result

    def transactions(self) -> list[Transaction]:
        rng = random.Random(self.seed)
        fake = Faker()
        fake.seed_instance(self.seed)

        customer_ids = [c[0] for c in CUSTOMERS]
        customer_accounts = {
            cid: [a[0] for a in ACCOUNTS if a[1] == cid] for cid in customer_ids
        }
        base_date = self._now - timedelta(days=HISTORY_DAYS)
        txns: list[Transaction] = []

        for i in range(PURCHASE_COUNT):
            merchant, category = rng.choice(MERCHANTS)
            customer_id = customer_ids[i % len(customer_ids)]
            account_id = rng.choice(customer_accounts[customer_id])
            amount = Decimal(str(round(rng.uniform(10, 510), 2)))
            is_credit = rng.randrange(10) == 0

            # Credit card: mostly charges
            if account_id == CREDIT_CARD_ACCOUNT and rng.randrange(5) > 0:
                is_credit = False
            # Loan: repayments only, and larger
            if account_id == LOAN_ACCOUNT:
                is_credit = True
                amount = Decimal(str(round(rng.uniform(200, 1200), 2)))

            txns.append(Transaction(
                id=fake.uuid4(),
                customer_id=customer_id,
                account_id=account_id,
                amount=amount if is_credit else -amount,
                currency="USD",
                transaction_date=base_date + timedelta(days=rng.randrange(HISTORY_DAYS)),
                description=f"Purchase at {merchant}",
                merchant_name=merchant,
                type=TransactionType.CREDIT if is_credit else TransactionType.DEBIT,
                category=category,
                status=TransactionStatus.COMPLETED,
                reference_number=f"TXN{fake.numerify('##########')}{i:03d}",
                data_source=rng.choice(["BankA", "CreditUnion"]),
                created_at=self._now, updated_at=self._now,
            ))

        for cid, aid, amount, days_ago, description, merchant, source, suffix in INCOME_CREDITS:
            txns.append(self._credit(fake, cid, aid, amount, days_ago, description,
                                     merchant, source, f"TXN{fake.numerify('##########')}{suffix}"))

        for cid in customer_ids:
            txns.append(self._credit(
                fake, cid, customer_accounts[cid][0], PAYROLL_AMOUNT, 30,
                "Salary Deposit", "Employer Corp", "Payroll System",
                f"SAL{fake.numerify('##########')}{cid}",
            ))

        return txns

    def _credit(self, fake: Faker, customer_id: str, account_id: str, amount: str,
                days_ago: int, description: str, merchant: str, source: str,
                reference: str) -> Transaction:
        return Transaction(
            id=fake.uuid4(),
            customer_id=customer_id,
            account_id=account_id,
            amount=Decimal(amount),
            currency="USD",
            transaction_date=self._now - timedelta(days=days_ago),
            description=description,
            merchant_name=merchant,
            type=TransactionType.CREDIT,
            category=TransactionCategory.INCOME,
            status=TransactionStatus.COMPLETED,
            reference_number=reference,
            data_source=source,
            created_at=self._now, updated_at=self._now,
        )
