"""
Pydantic models for the three entity collections (customers, accounts,
transactions) plus the API request / response shapes built on top of them.

All datetimes are kept as naive UTC; aware values are converted on the way in.
"""
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field, computed_field, field_validator


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# ──────────────────────────────────────────────
# Enumerations
# ──────────────────────────────────────────────

class CustomerStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"
    CLOSED = "CLOSED"


class AccountType(str, Enum):
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"
    CREDIT = "CREDIT"
    INVESTMENT = "INVESTMENT"
    LOAN = "LOAN"
    BUSINESS = "BUSINESS"


class AccountStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    FROZEN = "FROZEN"
    CLOSED = "CLOSED"


class TransactionType(str, Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
    TRANSFER = "TRANSFER"
    FEE = "FEE"
    INTEREST = "INTEREST"
    DIVIDEND = "DIVIDEND"
    REFUND = "REFUND"


class TransactionCategory(str, Enum):
    UNKNOWN = "UNKNOWN"         # not categorized yet
    FOOD = "FOOD"
    TRANSPORTATION = "TRANSPORTATION"
    ENTERTAINMENT = "ENTERTAINMENT"
    SHOPPING = "SHOPPING"
    BILLS = "BILLS"
    HEALTHCARE = "HEALTHCARE"
    EDUCATION = "EDUCATION"
    TRAVEL = "TRAVEL"
    INVESTMENT = "INVESTMENT"
    INCOME = "INCOME"
    TRANSFER = "TRANSFER"
    FEE = "FEE"
    INSURANCE = "INSURANCE"
    CHARITY = "CHARITY"
    OTHER = "OTHER"             # categorized, no rule matched


class TransactionStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    PROCESSING = "PROCESSING"


# ──────────────────────────────────────────────
# Entity Models
# ──────────────────────────────────────────────

class _Timestamped(BaseModel):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class Customer(_Timestamped):
    id: Optional[str] = None        # assigned by the store when absent
    first_name: str
    last_name: str
    email: str
    phone_number: str
    date_of_birth: date
    status: CustomerStatus = CustomerStatus.ACTIVE

    @computed_field
    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Account(_Timestamped):
    id: Optional[str] = None        # assigned by the store when absent
    customer_id: str
    account_number: str = ""
    account_name: str = ""
    type: AccountType = AccountType.CHECKING
    currency: str = "USD"           # ISO 4217
    balance: Decimal = Decimal("0")
    available_balance: Decimal = Decimal("0")
    status: AccountStatus = AccountStatus.ACTIVE
    opened_date: Optional[datetime] = None

    @field_validator("opened_date")
    @classmethod
    def _opened_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)


class Transaction(_Timestamped):
    id: str = Field(default_factory=new_id)
    customer_id: str
    account_id: str
    amount: Decimal                 # signed; no invariant ties sign to type
    currency: str = "USD"
    transaction_date: datetime = Field(default_factory=utcnow)
    description: str = ""
    merchant_name: str = ""
    type: TransactionType = TransactionType.DEBIT
    category: TransactionCategory = TransactionCategory.UNKNOWN
    status: TransactionStatus = TransactionStatus.PENDING
    reference_number: str = ""
    data_source: str = ""

    @field_validator("transaction_date")
    @classmethod
    def _date_naive_utc(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


# ──────────────────────────────────────────────
# Request validation helpers
# ──────────────────────────────────────────────

def _validate_date_of_birth(value: date) -> date:
    today = date.today()
    if value > today:
        raise ValueError("Date of birth cannot be in the future")
    age = today.year - value.year
    if (today.month, today.day) < (value.month, value.day):
        age -= 1
    if age < 18:
        raise ValueError("Customer must be at least 18 years old")
    if age > 120:
        raise ValueError("Date of birth seems unrealistic (age over 120 years)")
    return value


def _validate_transaction_date(value: datetime) -> datetime:
    value = to_naive_utc(value)
    now = utcnow()
    if value < now - timedelta(days=365):
        raise ValueError("Transaction date cannot be more than 1 year in the past")
    if value > now + timedelta(days=31):
        raise ValueError("Transaction date cannot be more than 1 month in the future")
    return value


PersonName = Annotated[str, Field(min_length=2, max_length=50, pattern=r"^[a-zA-Z\s'-]+$")]
Email = Annotated[str, Field(max_length=100, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")]
Phone = Annotated[str, Field(pattern=r"^\+?[1-9]\d{1,14}$")]
DateOfBirth = Annotated[date, AfterValidator(_validate_date_of_birth)]
EntityId = Annotated[str, Field(min_length=1, max_length=50)]
Currency = Annotated[str, Field(min_length=3, max_length=3, pattern=r"^[A-Z]{3}$")]
Money = Annotated[
    Decimal,
    Field(ge=Decimal("-1000000"), le=Decimal("1000000"), decimal_places=2),
]


# ──────────────────────────────────────────────
# API Request / Response Models
# ──────────────────────────────────────────────

class CustomerCreate(BaseModel):
    first_name: PersonName
    last_name: PersonName
    email: Email
    phone_number: Phone
    date_of_birth: DateOfBirth


class CustomerUpdate(BaseModel):
    first_name: Optional[PersonName] = None
    last_name: Optional[PersonName] = None
    email: Optional[Email] = None
    phone_number: Optional[Phone] = None
    date_of_birth: Optional[DateOfBirth] = None
    status: Optional[CustomerStatus] = None


class CustomerRead(Customer):
    accounts: list[Account] = Field(default_factory=list)


class AccountCreate(BaseModel):
    customer_id: EntityId
    account_name: str = Field(..., min_length=3, max_length=100)
    type: AccountType
    currency: Currency
    initial_balance: Money = Decimal("0")


class AccountUpdate(BaseModel):
    account_name: Optional[str] = Field(None, min_length=3, max_length=100)
    type: Optional[AccountType] = None
    currency: Optional[Currency] = None
    balance: Optional[Money] = None
    available_balance: Optional[Money] = None
    status: Optional[AccountStatus] = None


class TransactionCreate(BaseModel):
    customer_id: EntityId
    account_id: EntityId
    amount: Money
    currency: Currency
    transaction_date: Annotated[datetime, AfterValidator(_validate_transaction_date)]
    description: str = Field(..., min_length=3, max_length=500)
    merchant_name: str = Field(default="", max_length=100)
    type: TransactionType
    reference_number: str = Field(default="", max_length=100)
    data_source: str = Field(default="", max_length=100)


class TransactionUpdate(BaseModel):
    amount: Optional[Money] = None
    currency: Optional[Currency] = None
    description: Optional[str] = Field(None, min_length=3, max_length=500)
    merchant_name: Optional[str] = Field(None, max_length=100)
    type: Optional[TransactionType] = None
    category: Optional[TransactionCategory] = None
    status: Optional[TransactionStatus] = None


class TransactionSummary(BaseModel):
    total_transactions: int
    total_amount: Decimal
    average_amount: Decimal
    category_counts: dict[TransactionCategory, int]
    category_amounts: dict[TransactionCategory, Decimal]
    monthly_transaction_counts: dict[str, int]      # "YYYY-MM" → count
    monthly_amounts: dict[str, Decimal]


class AccountSummary(BaseModel):
    total_accounts: int
    accounts_by_type: dict[str, int]
    accounts_by_status: dict[str, int]
    total_balance: Decimal
    total_available_balance: Decimal
    accounts_by_customer: dict[str, int]


class SourceAggregationResult(BaseModel):
    data_source: str
    healthy: bool = False
    customers: int = 0
    fetched: int = 0
    inserted: int = 0
    skipped: int = 0                # already present in the store
    error: Optional[str] = None


class AggregationReport(BaseModel):
    started_at: datetime = Field(default_factory=utcnow)
    finished_at: Optional[datetime] = None
    sources: list[SourceAggregationResult] = Field(default_factory=list)

    @computed_field
    @property
    def inserted(self) -> int:
        return sum(s.inserted for s in self.sources)

    @computed_field
    @property
    def skipped(self) -> int:
        return sum(s.skipped for s in self.sources)
