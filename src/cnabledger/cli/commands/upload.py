"""Upload and import commands."""

from pathlib import Path

import click
from cnabledger.cli.commands.process import echo_processing_result
from cnabledger.cli.error_handling import handle_domain_error
from cnabledger.domain.errors import DomainError
from cnabledger.domain.file_processing import FileProcessingService
from cnabledger.domain.file_upload import FileUploadService


def _upload(ctx, path: str, uploaded_by: str | None):
    service = FileUploadService(ctx.obj["db"], ctx.obj["storage"])
    try:
        return service.upload(Path(path).name, Path(path).read_bytes(), uploaded_by=uploaded_by)
    except DomainError as e:
        handle_domain_error(ctx, e)


@click.command("upload")
@click.argument("cnab_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--uploaded-by", help="Name of the person uploading the file")
@click.pass_context
def upload_file(ctx, cnab_file: str, uploaded_by: str | None):
    """Register a CNAB file for processing.

    The file is stored and left in status Uploaded. Run 'process' or
    'process-pending' to apply it.
    """
    file = _upload(ctx, cnab_file, uploaded_by)
    click.echo(f"Uploaded '{file.name}' (ID: {file.id})")


@click.command("import")
@click.argument("cnab_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--uploaded-by", help="Name of the person uploading the file")
@click.pass_context
def import_file(ctx, cnab_file: str, uploaded_by: str | None):
    """Upload a CNAB file and process it right away."""
    file = _upload(ctx, cnab_file, uploaded_by)
    click.echo(f"Uploaded '{file.name}' (ID: {file.id})")

    result = FileProcessingService(ctx.obj["db"], ctx.obj["storage"]).process_file(file.id)
    echo_processing_result(file.id, result)
    if not result.success:
        ctx.exit(1)


def register_commands(cli):
    """Register upload commands with main CLI."""
    cli.add_command(upload_file)
    cli.add_command(import_file)
