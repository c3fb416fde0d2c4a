"""Transaction viewing command."""

import click
from cnabledger.cli.date_filters import PERIODS, resolve_cli_date_range
from cnabledger.cli.error_handling import handle_domain_error
from cnabledger.domain.errors import DomainError
from cnabledger.domain.store import StoreService
from cnabledger.domain.transaction import TransactionService
from cnabledger.utils.amount_parser import format_amount


@click.command("transactions")
@click.option("--store", "store_id", help="Store ID")
@click.option("--file", "file_id", help="File ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'last month', ...)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@click.option("--period", type=click.Choice(PERIODS), help="Named date range")
@click.pass_context
def list_transactions(
    ctx,
    store_id: str | None,
    file_id: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
):
    """View transactions with optional filters.

    Examples:
        cnabledger transactions --period this-month
        cnabledger transactions --store 7d0e... --start-date 2019-03-01
    """
    db = ctx.obj["db"]
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    service = TransactionService(db)
    try:
        transactions = service.list_transactions(
            store_id=store_id, file_id=file_id, start_date=start, end_date=end
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    stores = {store.id: store.name for store in StoreService(db).list_stores()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<10} {'Time':<8} {'Type':<13} {'Amount':>16} {'Store':<19} {'Card':<12}"
    )
    click.echo("-" * 100)
    for txn in transactions:
        click.echo(
            f"{txn.id:<6} {txn.date.isoformat():<10} {txn.time.isoformat():<8} "
            f"{txn.transaction_type.description:<13} {format_amount(txn.signed_amount):>16} "
            f"{stores.get(txn.store_id, 'Unknown'):<19} {txn.card:<12}"
        )
    click.echo("-" * 100)
    click.echo(f"Net: {format_amount(service.net_amount(transactions))}")


def register_commands(cli):
    """Register transactions command with main CLI."""
    cli.add_command(list_transactions)
