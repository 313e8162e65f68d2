"""Backup and invoice synchronization commands."""

import click
from famfin.domain.backup import BackupService
from famfin.domain.invoice import InvoiceService


@click.command("export")
@click.argument("path", required=False, type=click.Path())
@click.pass_context
def export_data(ctx, path: str | None):
    """Export every stored document to a backup file.

    PATH may be a file or a directory; by default a timestamped file is
    written to the current directory.
    """
    target = BackupService(ctx.obj["repo"]).export_to_file(path)
    click.echo(f"Exported data to {target}")


@click.command("import")
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_data(ctx, backup_file: str):
    """Restore stored documents from a backup file.

    Documents in the file replace the stored ones without validation.
    """
    if not BackupService(ctx.obj["repo"]).import_from_file(backup_file):
        click.echo("Error: Invalid or corrupt backup file.", err=True)
        ctx.exit(1)
    click.echo(f"Imported data from {backup_file}")


@click.command("sync")
@click.pass_context
def sync_invoices(ctx):
    """Recompute every credit-card invoice."""
    changed = InvoiceService(ctx.obj["repo"]).sync_all_linked_invoices()
    click.echo(f"Invoices synchronized ({changed} changed)")


def register_commands(cli):
    """Register backup and sync commands with main CLI."""
    cli.add_command(export_data)
    cli.add_command(import_data)
    cli.add_command(sync_invoices)
