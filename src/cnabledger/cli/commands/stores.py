"""Store commands."""

import click
from cnabledger.cli.error_handling import handle_domain_error
from cnabledger.domain.errors import DomainError
from cnabledger.domain.store import StoreService
from cnabledger.domain.transaction import TransactionService
from cnabledger.utils.amount_parser import cents_to_amount, format_amount


@click.group()
def store_group():
    """View stores and audit their balances."""
    pass


@store_group.command("list")
@click.pass_context
def list_stores(ctx):
    """List all stores with their balances."""
    service = StoreService(ctx.obj["db"])

    stores = service.list_stores()
    if not stores:
        click.echo("No stores found.")
        return

    click.echo(f"\nFound {len(stores)} store(s):")
    click.echo("-" * 90)
    click.echo(f"{'ID':<36} {'Store':<19} {'Owner':<14} {'Balance':>18}")
    click.echo("-" * 90)
    for store in stores:
        click.echo(
            f"{store.id:<36} {store.name:<19} {store.owner_name:<14} {format_amount(store.balance):>18}"
        )


@store_group.command("show")
@click.argument("store_id", metavar="STORE_ID")
@click.pass_context
def show_store(ctx, store_id: str):
    """Show a store and its transactions."""
    db = ctx.obj["db"]
    store = StoreService(db).get_store(store_id)
    if store is None:
        click.echo(f"Error: Store {store_id} not found", err=True)
        ctx.exit(1)

    click.echo(f"Store: {store.name}")
    click.echo(f"  ID: {store.id}")
    click.echo(f"  Owner: {store.owner_name}")
    click.echo(f"  Balance: {format_amount(store.balance)}")

    transactions = TransactionService(db).list_transactions(store_id=store.id)
    click.echo(f"  Transactions: {len(transactions)}")
    for txn in transactions:
        click.echo(
            f"    {txn.date.isoformat()} {txn.time.isoformat()} "
            f"{txn.transaction_type.description:<13} {format_amount(txn.signed_amount):>16}"
        )


@store_group.command("reconcile")
@click.argument("store_id", metavar="STORE_ID", required=False)
@click.option("--fix", is_flag=True, help="Correct balances that do not match the ledger")
@click.pass_context
def reconcile_stores(ctx, store_id: str | None, fix: bool):
    """Compare stored balances with the sum of each store's transactions.

    Checks every store unless STORE_ID is given. Exits with status 1 when a
    mismatch is found and --fix is not set.
    """
    service = StoreService(ctx.obj["db"])
    try:
        store_ids = [store_id] if store_id else [store.id for store in service.list_stores()]
        checks = [
            service.recompute_balance(sid) if fix else service.check_balance(sid)
            for sid in store_ids
        ]
    except DomainError as e:
        handle_domain_error(ctx, e)

    mismatches = [check for check in checks if not check.is_consistent]
    for check in mismatches:
        stored = format_amount(cents_to_amount(check.stored_cents))
        ledger = format_amount(cents_to_amount(check.ledger_cents))
        action = "fixed" if fix else "mismatch"
        click.echo(f"Store {check.store_id}: {action} (stored {stored}, ledger {ledger})")

    click.echo(f"Checked {len(checks)} store(s), {len(mismatches)} mismatch(es).")
    if mismatches and not fix:
        ctx.exit(1)


@store_group.command("delete")
@click.argument("store_id", metavar="STORE_ID")
@click.pass_context
def delete_store(ctx, store_id: str):
    """Delete a store that has no transactions."""
    service = StoreService(ctx.obj["db"])
    try:
        service.delete_store(store_id)
        click.echo(f"Deleted store {store_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register store commands with main CLI."""
    cli.add_command(store_group, name="store")
