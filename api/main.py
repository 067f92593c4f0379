"""
Transaction Aggregation Service – FastAPI Application
======================================================
Endpoints:
  GET  /health                          → service health + data source status
  GET  /api/customers/                  → customers (CRUD under /api/customers)
  GET  /api/accounts/                   → accounts (CRUD, by type, summary)
  GET  /api/transactions/               → transactions (CRUD, filters, summary)
  POST /api/transactions/aggregate      → pull from every configured data source
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aggregation.service import TransactionAggregator
from api import cache
from api.dependencies import get_aggregator, get_data_sources
from api.routes.accounts import router as accounts_router
from api.routes.customers import router as customers_router
from api.routes.transactions import router as txn_router
from config.settings import Settings
from data.sources import DataSource, build_data_sources
from db.exceptions import DuplicateEntityError, EntityNotFoundError
from db.store import build_stores
from monitoring.logger import setup_logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "Transaction Aggregation API"
VERSION = "1.0.0"


def _validation_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by field name, dropping the body/query prefix."""
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        errors.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return errors


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        setup_logging(settings.log_level, settings.log_format)
        cache.clear()
        app.state.settings = settings
        app.state.stores = build_stores(
            strict_not_found=settings.strict_not_found,
            seed_sample_data=settings.seed_sample_data,
            sample_data_seed=settings.sample_data_seed,
        )
        app.state.data_sources = build_data_sources(
            settings.data_sources,
            seed=settings.data_source_seed,
            latency_scale=settings.effective_latency_scale,
        )
        app.state.aggregator = TransactionAggregator(
            app.state.stores.transactions, app.state.data_sources,
        )
        logger.info("%s started with data sources: %s",
                    SERVICE_NAME, ", ".join(s.name for s in app.state.data_sources))
        yield
        # Shutdown
        cache.clear()
        logger.info("%s stopped", SERVICE_NAME)

    app = FastAPI(
        title=SERVICE_NAME,
        description=(
            "Aggregates customer transactions from several financial data sources, "
            "categorizes them by keyword rules and serves customers, accounts and "
            "transactions over a REST API."
        ),
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(EntityNotFoundError)
    async def not_found_handler(request: Request, exc: EntityNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(DuplicateEntityError)
    async def duplicate_handler(request: Request, exc: DuplicateEntityError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "message": "One or more validation errors occurred",
                "errors": _validation_errors(exc),
            },
        )

    app.include_router(customers_router)
    app.include_router(accounts_router)
    app.include_router(txn_router)

    @app.get("/health", tags=["System"])
    async def health_check(
        request: Request,
        sources: list[DataSource] = Depends(get_data_sources),
        aggregator: TransactionAggregator = Depends(get_aggregator),
    ):
        """Service health including every data source and the store sizes."""
        results = await asyncio.gather(*(s.check_health() for s in sources))
        source_status = {s.name: ok for s, ok in zip(sources, results)}
        stores = request.app.state.stores
        last = aggregator.last_report

        return {
            "status": "healthy" if all(results) else "degraded",
            "data_sources": source_status,
            "store": {
                "customers": await stores.customers.count(),
                "accounts": await stores.accounts.count(),
                "transactions": await stores.transactions.count(),
            },
            "aggregation": {
                "running": aggregator.running,
                "last_run": last.finished_at.isoformat() if last and last.finished_at else None,
            },
        }

    @app.get("/", tags=["System"])
    async def root():
        return {
            "service": SERVICE_NAME,
            "docs": "/docs",
            "health": "/health",
            "version": VERSION,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    from config.settings import settings

    uvicorn.run("api.main:app", host=settings.api_host, port=settings.api_port,
                reload=settings.debug)
