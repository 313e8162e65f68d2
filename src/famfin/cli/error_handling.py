"""CLI error handling helpers."""

import logging
import sys

import click

from famfin.domain.errors import CorruptDocumentError, DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Echo a domain error to stderr and exit with status 1."""
    logger.debug("Command failed: %s", error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def report_corrupt_document(error: CorruptDocumentError) -> None:
    """Explain an unreadable stored document and exit with status 1.

    Raised from any read, so it surfaces outside the commands' own handlers.
    """
    click.echo(f"Error: {error}", err=True)
    click.echo("Restore a backup with 'famfin import FILE' to recover.", err=True)
    sys.exit(1)
