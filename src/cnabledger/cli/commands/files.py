"""File management commands."""

import click
from cnabledger.cli.error_handling import handle_domain_error
from cnabledger.domain.errors import DomainError
from cnabledger.domain.file_service import FileService
from cnabledger.domain.file_status import FileStatus


def _format_timestamp(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else "-"


@click.group()
def file_group():
    """Manage uploaded files."""
    pass


@file_group.command("list")
@click.option(
    "--status",
    type=click.Choice([status.value for status in FileStatus], case_sensitive=False),
    help="Only show files in this status",
)
@click.pass_context
def list_files(ctx, status: str | None):
    """List uploaded files, oldest first."""
    service = FileService(ctx.obj["db"])
    if status is not None:
        status = next(s for s in FileStatus if s.value.lower() == status.lower())

    files = service.list_files(status=status)
    if not files:
        click.echo("No files found.")
        return

    click.echo(f"\nFound {len(files)} file(s):")
    click.echo("-" * 110)
    click.echo(f"{'ID':<36} {'Name':<30} {'Status':<10} {'Uploaded':<19} {'Txns':>6} {'Stores':>6}")
    click.echo("-" * 110)
    for file in files:
        click.echo(
            f"{file.id:<36} {file.name[:30]:<30} {file.status.value:<10} "
            f"{_format_timestamp(file.uploaded_at):<19} {file.transaction_count:>6} {file.store_count:>6}"
        )


@file_group.command("show")
@click.argument("file_id", metavar="FILE_ID")
@click.option("--errors", "show_errors", is_flag=True, help="List every validation error")
@click.pass_context
def show_file(ctx, file_id: str, show_errors: bool):
    """Show details of a file."""
    service = FileService(ctx.obj["db"])
    file = service.get_file(file_id)
    if file is None:
        click.echo(f"Error: File not found: {file_id}", err=True)
        ctx.exit(1)

    click.echo(f"File ID: {file.id}")
    click.echo(f"  Name: {file.name}")
    click.echo(f"  Size: {file.size} bytes")
    click.echo(f"  Status: {file.status.value}")
    click.echo(f"  Uploaded: {_format_timestamp(file.uploaded_at)}")
    if file.uploaded_by:
        click.echo(f"  Uploaded by: {file.uploaded_by}")
    click.echo(f"  Processed: {_format_timestamp(file.processed_at)}")
    click.echo(f"  Transactions: {file.transaction_count}")
    click.echo(f"  Stores: {file.store_count}")
    if file.error_message:
        click.echo(f"  Error: {file.error_message}")
    if file.validation_errors:
        if show_errors:
            click.echo("  Validation errors:")
            for error in file.validation_errors:
                click.echo(f"    {error}")
        else:
            click.echo(f"  Validation errors: {len(file.validation_errors)} (use --errors to list)")


@file_group.command("delete")
@click.argument("file_id", metavar="FILE_ID")
@click.confirmation_option(prompt="Delete this file and all of its transactions?")
@click.pass_context
def delete_file(ctx, file_id: str):
    """Delete a file and its transactions.

    Store balances are reduced by the deleted transactions.
    """
    service = FileService(ctx.obj["db"], ctx.obj["storage"])
    try:
        service.delete_file(file_id)
        click.echo(f"Deleted file {file_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register file commands with main CLI."""
    cli.add_command(file_group, name="file")
