"""
Interactive demo – aggregate transactions from the stub data sources and
show what landed in the store.

Usage:
  python scripts/demo.py
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

console = Console()


def amount_colour(amount) -> str:
    return "green" if amount > 0 else "red"


async def run_demo():
    from aggregation.service import TransactionAggregator
    from aggregation.summary import transaction_summary
    from config.settings import settings
    from data.sources import build_data_sources
    from db.store import build_stores

    stores = build_stores(seed_sample_data=False)
    sources = build_data_sources(
        settings.data_sources,
        seed=settings.data_source_seed,
        latency_scale=settings.effective_latency_scale,
    )
    aggregator = TransactionAggregator(stores.transactions, sources)

    with console.status("Aggregating transactions..."):
        report = await aggregator.aggregate()

    table = Table(title="Aggregation Report", box=box.ROUNDED, show_lines=True)
    table.add_column("Data Source", style="cyan")
    table.add_column("Healthy", justify="center")
    table.add_column("Customers", justify="right")
    table.add_column("Fetched", justify="right")
    table.add_column("Inserted", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Error", max_width=40)
    for result in report.sources:
        table.add_row(
            result.data_source,
            "✅" if result.healthy else "🚫",
            str(result.customers),
            str(result.fetched),
            str(result.inserted),
            str(result.skipped),
            result.error or "—",
        )
    console.print(table)

    recent = Table(title="Most Recent Transactions", box=box.SIMPLE)
    recent.add_column("Date")
    recent.add_column("Customer", style="cyan")
    recent.add_column("Description", max_width=40)
    recent.add_column("Category")
    recent.add_column("Amount", justify="right")
    for txn in (await stores.transactions.list_all())[:10]:
        recent.add_row(
            txn.transaction_date.strftime("%Y-%m-%d"),
            txn.customer_id,
            txn.description,
            txn.category.value,
            f"[{amount_colour(txn.amount)}]{txn.amount:,.2f}[/]",
        )
    console.print(recent)

    summary = await transaction_summary(stores.transactions)
    lines = "\n".join(
        f"  {category.value:<15} {count:>4}  {summary.category_amounts[category]:>12,.2f}"
        for category, count in sorted(summary.category_counts.items(), key=lambda kv: -kv[1])
    )
    console.print(Panel(
        f"[bold]{summary.total_transactions}[/] transactions, "
        f"total [bold]{summary.total_amount:,.2f}[/], "
        f"average [bold]{summary.average_amount:,.2f}[/]\n\n{lines}",
        title="Summary by Category",
        border_style="cyan",
    ))

    # Second run: everything is already stored
    again = await aggregator.aggregate()
    console.print(f"Re-running aggregation: [bold]{again.inserted}[/] inserted, "
                  f"[bold]{again.skipped}[/] skipped")


def main():
    console.print(Panel("[bold cyan]Transaction Aggregation – Live Demo[/]",
                        subtitle="Pulling from the stub data sources"))
    asyncio.run(run_demo())


if __name__ == "__main__":
    main()
