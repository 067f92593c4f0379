"""
FastAPI dependency functions handing out the per-application singletons
created in the lifespan handler (stores, data sources, aggregator).

Usage:
    @router.get("/")
    async def list_things(store: TransactionStore = Depends(get_transaction_store)):
        ...
"""
from fastapi import Request

from aggregation.service import TransactionAggregator
from config.settings import Settings
from data.sources import DataSource
from db.store import AccountStore, CustomerStore, TransactionStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_customer_store(request: Request) -> CustomerStore:
    return request.app.state.stores.customers


def get_account_store(request: Request) -> AccountStore:
    return request.app.state.stores.accounts


def get_transaction_store(request: Request) -> TransactionStore:
    return request.app.state.stores.transactions


def get_data_sources(request: Request) -> list[DataSource]:
    return request.app.state.data_sources


def get_aggregator(request: Request) -> TransactionAggregator:
    return request.app.state.aggregator
