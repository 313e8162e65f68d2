"""Recurring bill commands."""

from datetime import date

import click
from famfin.cli.error_handling import handle_domain_error
from famfin.cli.resolution import resolve_entity
from famfin.domain.category import CategoryService
from famfin.domain.entities import RecurringBill
from famfin.domain.errors import DomainError, bill_not_found
from famfin.domain.recurring import RecurringBillService
from famfin.utils.amount_parser import format_currency, parse_currency


@click.group()
def bill_group():
    """Manage recurring bills."""
    pass


@bill_group.command("create")
@click.argument("name")
@click.option("--due-day", type=click.IntRange(1, 31), required=True, help="Day of month the bill is due")
@click.option("--value", help="Expected value (e.g., '150,00')")
@click.option("--category", help="Category paying this bill (name or ID); defaults to matching by name")
@click.option("--group", "group_name", help="Group label")
@click.pass_context
def create_bill(ctx, name: str, due_day: int, value: str | None, category: str | None, group_name: str | None):
    """Create a recurring bill.

    Expense transactions in the bill's category mark the bill paid for
    their month.

    Examples:
        famfin bill create "Housing" --due-day 10 --value "1.500,00"
    """
    repo = ctx.obj["repo"]
    category_id = None
    if category:
        try:
            category_id = resolve_entity(CategoryService(repo).list_categories(), category, "Category").id
        except DomainError as e:
            handle_domain_error(ctx, e)

    bill = RecurringBillService(repo).save_bill(
        RecurringBill(
            id="",
            name=name,
            due_day=due_day,
            value=parse_currency(value) if value else None,
            group=group_name,
            category_id=category_id,
        )
    )
    click.echo(f"Created bill '{name}' (ID: {bill.id})")


@bill_group.command("list")
@click.option("--year", type=int, help="Year to report status for (default: current)")
@click.pass_context
def list_bills(ctx, year: int | None):
    """List bills with their status for the current month."""
    service = RecurringBillService(ctx.obj["repo"])
    bills = service.list_bills()
    if not bills:
        click.echo("No recurring bills found.")
        return

    year = year or date.today().year
    for bill in bills:
        value = format_currency(bill.value) if bill.value is not None else "-"
        click.echo(
            f"ID: {bill.id:>12s} | day {bill.due_day:2d} | {bill.name:25s} | "
            f"{value:>14s} | {service.bill_status(bill, year).value}"
        )


@bill_group.command("toggle")
@click.argument("bill_id")
@click.argument("year", type=int)
@click.argument("month", type=click.IntRange(1, 12))
@click.pass_context
def toggle_bill(ctx, bill_id: str, year: int, month: int):
    """Flip the paid flag of a bill for a month."""
    paid = RecurringBillService(ctx.obj["repo"]).toggle_payment(bill_id, year, month)
    if paid is None:
        click.echo(f"Error: {bill_not_found(bill_id)}", err=True)
        ctx.exit(1)
    click.echo(f"Bill {bill_id} {'paid' if paid else 'unpaid'} for {year}-{month:02d}")


@bill_group.command("due-today")
@click.pass_context
def due_today(ctx):
    """List unpaid bills due today."""
    bills = RecurringBillService(ctx.obj["repo"]).due_today()
    if not bills:
        click.echo("Nothing due today.")
        return
    for bill in bills:
        click.echo(f"{bill.name} ({format_currency(bill.value) if bill.value is not None else '-'})")


@bill_group.command("link-categories")
@click.pass_context
def link_categories(ctx):
    """Store the category of every bill still matched by name."""
    linked = RecurringBillService(ctx.obj["repo"]).assign_categories_by_name()
    click.echo(f"Linked {linked} bill(s) to their categories")


@bill_group.command("delete")
@click.argument("bill_id")
@click.pass_context
def delete_bill(ctx, bill_id: str):
    """Delete a recurring bill."""
    if not RecurringBillService(ctx.obj["repo"]).delete_bill(bill_id):
        click.echo(f"Error: {bill_not_found(bill_id)}", err=True)
        ctx.exit(1)
    click.echo(f"Deleted bill {bill_id}")


def register_commands(cli):
    """Register recurring bill commands with main CLI."""
    cli.add_command(bill_group, name="bill")
