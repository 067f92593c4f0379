"""Transaction management routes."""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from aggregation.service import TransactionAggregator
from aggregation.summary import transaction_summary
from api.cache import TRANSACTION_SUMMARY_PREFIX, get_cached, invalidate_prefix, set_cached
from api.dependencies import get_aggregator, get_settings, get_transaction_store
from categorization.engine import categorize
from config.settings import Settings
from db.models import (
    AggregationReport, Transaction, TransactionCategory, TransactionCreate,
    TransactionSummary, TransactionUpdate, to_naive_utc,
)
from db.store import TransactionStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])

# Fields the categorizer reads
RECATEGORIZE_FIELDS = {"description", "merchant_name", "amount"}


@router.get("/", response_model=list[Transaction])
async def list_transactions(transactions: TransactionStore = Depends(get_transaction_store)):
    """All stored transactions, newest first."""
    return await transactions.list_all()


@router.get("/summary", response_model=TransactionSummary)
async def get_transaction_summary(
    customer_id: Optional[str] = Query(default=None),
    start_date: Optional[datetime] = Query(default=None),
    end_date: Optional[datetime] = Query(default=None),
    transactions: TransactionStore = Depends(get_transaction_store),
    settings: Settings = Depends(get_settings),
):
    """
    Totals, averages and per-category / per-month breakdowns.
    The date window is applied only when both start_date and end_date are given.
    Cached until the next transaction write.
    """
    cache_key = f"{TRANSACTION_SUMMARY_PREFIX}{customer_id}:{start_date}:{end_date}"
    cached = get_cached(cache_key)
    if cached is not None:
        return cached
    summary = await transaction_summary(transactions, customer_id, start_date, end_date)
    set_cached(cache_key, summary, ttl=settings.summary_cache_ttl)
    return summary


@router.get("/daterange", response_model=list[Transaction])
async def list_transactions_by_date_range(
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
    transactions: TransactionStore = Depends(get_transaction_store),
):
    """Transactions dated within [start_date, end_date], both ends inclusive."""
    start_date, end_date = to_naive_utc(start_date), to_naive_utc(end_date)
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="End date must be after start date")
    return await transactions.list_by_date_range(start_date, end_date)


@router.get("/customer/{customer_id}", response_model=list[Transaction])
async def list_transactions_by_customer(
    customer_id: str,
    transactions: TransactionStore = Depends(get_transaction_store),
):
    return await transactions.list_by_customer(customer_id)


@router.get("/account/{account_id}", response_model=list[Transaction])
async def list_transactions_by_account(
    account_id: str,
    transactions: TransactionStore = Depends(get_transaction_store),
):
    return await transactions.list_by_account(account_id)


@router.get("/category/{category}", response_model=list[Transaction])
async def list_transactions_by_category(
    category: TransactionCategory,
    transactions: TransactionStore = Depends(get_transaction_store),
):
    return await transactions.list_by_category(category)


@router.get("/source/{data_source}", response_model=list[Transaction])
async def list_transactions_by_source(
    data_source: str,
    transactions: TransactionStore = Depends(get_transaction_store),
):
    """Transactions that originated from the named data source."""
    return await transactions.list_by_source(data_source)


@router.get("/{txn_id}", response_model=Transaction)
async def get_transaction(txn_id: str, transactions: TransactionStore = Depends(get_transaction_store)):
    transaction = await transactions.get_by_id(txn_id)
    if transaction is None:
        raise HTTPException(status_code=404, detail=f"Transaction with ID '{txn_id}' not found")
    return transaction


@router.post("/", response_model=Transaction, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    req: TransactionCreate,
    transactions: TransactionStore = Depends(get_transaction_store),
):
    """Record a transaction. It is categorized before it is stored."""
    logger.info("Creating new transaction for customer: %s", req.customer_id)
    transaction = Transaction(**req.model_dump())
    transaction.category = categorize(transaction)
    created = await transactions.create(transaction)
    invalidate_prefix(TRANSACTION_SUMMARY_PREFIX)
    return created


@router.put("/{txn_id}", response_model=Transaction)
async def update_transaction(
    txn_id: str,
    req: TransactionUpdate,
    transactions: TransactionStore = Depends(get_transaction_store),
):
    """
    Partial update. Changing the description, merchant name or amount
    re-categorizes the transaction unless the request sets a category itself.
    """
    changes = req.model_dump(exclude_unset=True, exclude_none=True)
    if "category" not in changes and RECATEGORIZE_FIELDS & changes.keys():
        current = await transactions.get_by_id(txn_id)
        if current is not None:
            changes["category"] = categorize(current.model_copy(update=changes))

    updated = await transactions.update(txn_id, changes)
    invalidate_prefix(TRANSACTION_SUMMARY_PREFIX)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Transaction with ID '{txn_id}' not found")
    return updated


@router.delete("/{txn_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(txn_id: str, transactions: TransactionStore = Depends(get_transaction_store)):
    await transactions.delete(txn_id)
    invalidate_prefix(TRANSACTION_SUMMARY_PREFIX)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/aggregate")
async def aggregate_transactions(aggregator: TransactionAggregator = Depends(get_aggregator)):
    """
    Pull transactions from every configured data source into the store.
    Unhealthy or failing sources are skipped; already-stored ids are not
    inserted twice.
    """
    report: AggregationReport = await aggregator.aggregate()
    invalidate_prefix(TRANSACTION_SUMMARY_PREFIX)
    return {
        "message": "Transaction aggregation completed successfully",
        "report": report.model_dump(mode="json"),
    }
