"""Account routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from aggregation.summary import summarize_accounts
from api.cache import ACCOUNT_SUMMARY_PREFIX, get_cached, invalidate_prefix, set_cached
from api.dependencies import get_account_store, get_settings
from config.settings import Settings
from db.models import (
    Account, AccountCreate, AccountStatus, AccountSummary, AccountType, AccountUpdate,
)
from db.store import AccountStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/accounts", tags=["Accounts"])


@router.get("/", response_model=list[Account])
async def list_accounts(accounts: AccountStore = Depends(get_account_store)):
    return await accounts.list_all()


@router.get("/summary", response_model=AccountSummary)
async def account_summary(
    accounts: AccountStore = Depends(get_account_store),
    settings: Settings = Depends(get_settings),
):
    """Counts by type / status / customer and balance totals. Cached briefly."""
    cache_key = f"{ACCOUNT_SUMMARY_PREFIX}all"
    cached = get_cached(cache_key)
    if cached is not None:
        return cached
    summary = summarize_accounts(await accounts.list_all())
    set_cached(cache_key, summary, ttl=settings.summary_cache_ttl)
    return summary


@router.get("/type/{account_type}", response_model=list[Account])
async def list_accounts_by_type(
    account_type: str,
    accounts: AccountStore = Depends(get_account_store),
):
    """Accounts of one type. The type name is matched case-insensitively."""
    try:
        wanted = AccountType(account_type.upper())
    except ValueError:
        valid = ", ".join(t.value for t in AccountType)
        raise HTTPException(status_code=400, detail=f"Invalid account type. Valid types: {valid}")
    return await accounts.list_by_type(wanted)


@router.get("/customer/{customer_id}", response_model=list[Account])
async def list_accounts_by_customer(
    customer_id: str,
    accounts: AccountStore = Depends(get_account_store),
):
    return await accounts.list_by_customer(customer_id)


@router.get("/{account_id}", response_model=Account)
async def get_account(account_id: str, accounts: AccountStore = Depends(get_account_store)):
    account = await accounts.get_by_id(account_id)
    if account is None:
        raise HTTPException(status_code=404, detail=f"Account with ID '{account_id}' not found")
    return account


@router.post("/", response_model=Account, status_code=status.HTTP_201_CREATED)
async def create_account(req: AccountCreate, accounts: AccountStore = Depends(get_account_store)):
    """
    Open an account. The owning customer id is not checked against the
    customer store; available balance starts at the opening balance.
    """
    logger.info("Creating new account for customer: %s", req.customer_id)
    account = Account(
        customer_id=req.customer_id,
        account_name=req.account_name,
        type=req.type,
        currency=req.currency,
        balance=req.initial_balance,
        available_balance=req.initial_balance,
        status=AccountStatus.ACTIVE,
    )
    created = await accounts.create(account)
    invalidate_prefix(ACCOUNT_SUMMARY_PREFIX)
    return created


@router.put("/{account_id}", response_model=Account)
async def update_account(
    account_id: str,
    req: AccountUpdate,
    accounts: AccountStore = Depends(get_account_store),
):
    updated = await accounts.update(account_id, req.model_dump(exclude_unset=True, exclude_none=True))
    invalidate_prefix(ACCOUNT_SUMMARY_PREFIX)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Account with ID '{account_id}' not found")
    return updated


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(account_id: str, accounts: AccountStore = Depends(get_account_store)):
    await accounts.delete(account_id)
    invalidate_prefix(ACCOUNT_SUMMARY_PREFIX)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
