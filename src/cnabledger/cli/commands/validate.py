"""Dry-run validation command."""

import click
from cnabledger.domain.cnab_file import CNABFileParser
from cnabledger.utils.amount_parser import cents_to_amount, format_amount


@click.command("validate")
@click.argument("cnab_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def validate_file(ctx, cnab_file: str):
    """Check a CNAB file without storing anything."""
    with open(cnab_file, "rb") as stream:
        result = CNABFileParser().parse(stream)

    if not result.is_valid:
        click.echo(f"{cnab_file}: invalid ({len(result.errors)} error(s) in {result.line_count} line(s))")
        for error in result.errors:
            click.echo(f"  {error}", err=True)
        ctx.exit(1)

    stores = {record.store_key for record in result.valid_records}
    net_cents = sum(record.signed_cents for record in result.valid_records)
    click.echo(
        f"{cnab_file}: valid ({len(result.valid_records)} transaction(s), "
        f"{len(stores)} store(s), net {format_amount(cents_to_amount(net_cents))})"
    )


def register_commands(cli):
    """Register validate command with main CLI."""
    cli.add_command(validate_file)
