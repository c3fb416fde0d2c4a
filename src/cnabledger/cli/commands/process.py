"""File processing commands."""

import json
import uuid

import click
from cnabledger.domain.file_processing import FileProcessingService, ProcessingResult
from cnabledger.domain.file_service import FileService
from cnabledger.domain.file_status import FileStatus


def echo_processing_result(file_id: str, result: ProcessingResult, as_json: bool = False) -> None:
    """Print a processing result for one file."""
    if as_json:
        click.echo(json.dumps({"fileId": file_id, **result.to_dict()}, indent=2))
        return

    if result.success:
        click.echo(
            f"File {file_id}: {result.status} "
            f"({result.transactions_inserted} transactions, {result.stores_upserted} stores)"
        )
        return

    click.echo(f"File {file_id}: {result.status}")
    if result.error_message:
        click.echo(f"Error: {result.error_message}", err=True)
    for error in result.validation_errors:
        click.echo(f"  {error}", err=True)


@click.command("process")
@click.argument("file_id", metavar="FILE_ID")
@click.option("--correlation-id", help="Correlation ID for the log lines of this run")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def process_file(ctx, file_id: str, correlation_id: str | None, as_json: bool):
    """Process an uploaded file.

    Parses and validates every line, then applies all transactions to store
    balances in a single transaction. Processing a file that already
    finished changes nothing.

    Examples:
        cnabledger process 3f1c...
        cnabledger process 3f1c... --json
    """
    service = FileProcessingService(ctx.obj["db"], ctx.obj["storage"])
    result = service.process_file(file_id, correlation_id=correlation_id)
    echo_processing_result(file_id, result, as_json=as_json)
    if not result.success:
        ctx.exit(1)


@click.command("process-pending")
@click.pass_context
def process_pending(ctx):
    """Process every file still in status Uploaded, oldest first."""
    db = ctx.obj["db"]
    pending = FileService(db).list_files(status=FileStatus.UPLOADED)
    if not pending:
        click.echo("No pending files.")
        return

    service = FileProcessingService(db, ctx.obj["storage"])
    failed = 0
    for file in pending:
        result = service.process_file(
            file.id, storage_key=file.storage_key, correlation_id=str(uuid.uuid4())
        )
        echo_processing_result(file.id, result)
        if not result.success:
            failed += 1

    click.echo(f"\nProcessed {len(pending) - failed} of {len(pending)} pending file(s).")
    if failed:
        ctx.exit(1)


def register_commands(cli):
    """Register processing commands with main CLI."""
    cli.add_command(process_file)
    cli.add_command(process_pending)
