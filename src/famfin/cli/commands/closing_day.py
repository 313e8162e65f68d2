"""Credit-card closing day commands."""

import click
from famfin.cli.error_handling import handle_domain_error
from famfin.domain.billing import BillingService
from famfin.domain.errors import DomainError
from famfin.utils.date_parser import month_abbreviation


@click.group()
def closing_day_group():
    """Manage credit-card closing days."""
    pass


@closing_day_group.command("set")
@click.argument("year", type=int)
@click.argument("month", type=click.IntRange(1, 12))
@click.argument("day", type=int)
@click.pass_context
def set_closing_day(ctx, year: int, month: int, day: int):
    """Set the closing day for purchases made in a month.

    Changing it re-dates purchases already made in that month and
    resynchronizes the card invoices.

    Examples:
        famfin closing-day set 2025 3 20
    """
    try:
        BillingService(ctx.obj["repo"]).set_closing_day(year, month, day)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Closing day for {year}-{month:02d} set to {day}")


@closing_day_group.command("show")
@click.argument("year", type=int)
@click.pass_context
def show_closing_days(ctx, year: int):
    """Show the closing day of every month of a year."""
    service = BillingService(ctx.obj["repo"])
    locale = ctx.obj["locale"]
    for month in range(1, 13):
        click.echo(f"{month_abbreviation(month, locale)} {year}: day {service.get_closing_day(year, month)}")


def register_commands(cli):
    """Register closing day commands with main CLI."""
    cli.add_command(closing_day_group, name="closing-day")
