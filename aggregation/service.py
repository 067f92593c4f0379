"""
Transaction Aggregation
========================
Pulls transactions from every configured data source into the transaction
store:

  1. Health-check the source; an unhealthy source is skipped
  2. Fetch the source's customers
  3. Fetch each customer's transactions (no date filter)
  4. Categorize them
  5. Insert every transaction whose id is not already stored

A failure while processing one source is logged and recorded in the report;
the remaining sources are still processed. Transactions inserted before the
failure stay in the store. Runs are serialized, so concurrent triggers never
interleave.
"""
import asyncio
import logging
from typing import Callable, Iterable, Sequence

from categorization.engine import categorize_transactions
from data.sources import DataSource
from db.models import AggregationReport, SourceAggregationResult, Transaction, utcnow
from db.store import TransactionStore

logger = logging.getLogger(__name__)


class TransactionAggregator:
    def __init__(
        self,
        transactions: TransactionStore,
        data_sources: Sequence[DataSource],
        categorizer: Callable[[Iterable[Transaction]], list[Transaction]] = categorize_transactions,
    ):
        self.transactions = transactions
        self.data_sources = list(data_sources)
        self.categorizer = categorizer
        self._lock = asyncio.Lock()
        self.last_report: AggregationReport | None = None

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def aggregate(self) -> AggregationReport:
        async with self._lock:
            report = AggregationReport()
            logger.info("Starting transaction aggregation from %d data sources",
                        len(self.data_sources))

            for source in self.data_sources:
                result = SourceAggregationResult(data_source=source.name)
                report.sources.append(result)
                try:
                    await self._aggregate_source(source, result)
                except Exception as exc:
                    result.error = f"{type(exc).__name__}: {exc}"
                    logger.exception("Error aggregating transactions from data source: %s",
                                     source.name)

            report.finished_at = utcnow()
            self.last_report = report
            logger.info("Completed transaction aggregation: %d inserted, %d skipped",
                        report.inserted, report.skipped)
            return report

    async def _aggregate_source(self, source: DataSource, result: SourceAggregationResult) -> None:
        result.healthy = await source.check_health()
        if not result.healthy:
            logger.warning("Data source %s is not healthy, skipping", source.name)
            return

        logger.info("Aggregating transactions from data source: %s", source.name)
        customers = await source.list_customers()
        result.customers = len(customers)

        for customer in customers:
            fetched = await source.list_transactions(customer.id)
            result.fetched += len(fetched)
            for txn in self.categorizer(fetched):
                if await self.transactions.add_if_absent(txn):
                    result.inserted += 1
                else:
                    result.skipped += 1

        logger.info("Completed aggregation from data source: %s (%d inserted, %d skipped)",
                    source.name, result.inserted, result.skipped)
