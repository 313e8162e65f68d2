"""Summary commands."""

import click
from famfin.cli.error_handling import handle_domain_error
from famfin.cli.resolution import resolve_entity
from famfin.domain.errors import DomainError
from famfin.domain.payment_method import PaymentMethodService
from famfin.domain.summary import SummaryService
from famfin.utils.amount_parser import format_currency
from famfin.utils.date_parser import month_abbreviation


@click.group()
def summary_group():
    """Show summaries and projections."""
    pass


@summary_group.command("month")
@click.argument("year", type=int)
@click.argument("month", type=click.IntRange(1, 12))
@click.pass_context
def month_summary(ctx, year: int, month: int):
    """Show income, expenses and category breakdown for a month.

    Credit-card purchases count in the month of their invoice.
    """
    service = SummaryService(ctx.obj["repo"])
    summary = service.monthly_summary(month, year)

    click.echo(f"\n{month_abbreviation(month, ctx.obj['locale'])} {year}")
    click.echo("-" * 60)
    click.echo(f"{'':20s} {'Confirmed':>18s} {'Total':>18s}")
    click.echo(
        f"{'Income':20s} {format_currency(summary.confirmed_income):>18s} "
        f"{format_currency(summary.total_income):>18s}"
    )
    click.echo(
        f"{'Expenses':20s} {format_currency(summary.confirmed_expense):>18s} "
        f"{format_currency(summary.total_expense):>18s}"
    )
    click.echo(
        f"{'Balance':20s} {format_currency(summary.confirmed_balance):>18s} "
        f"{format_currency(summary.balance):>18s}"
    )

    categories = service.category_summary(month, year)
    if categories:
        click.echo("\nExpenses by category:")
        for item in categories:
            click.echo(
                f"  {item.category_name:30s} {format_currency(item.total):>16s} {item.percentage:6.1f}%"
            )


@summary_group.command("year")
@click.argument("year", type=int)
@click.pass_context
def year_summary(ctx, year: int):
    """Show the month-by-month history of a year."""
    history = SummaryService(ctx.obj["repo"]).yearly_history(year)
    click.echo(f"{'':6s} {'Income':>16s} {'Expenses':>16s} {'Balance':>16s}")
    for point in history:
        click.echo(
            f"{point.label:6s} {format_currency(point.income):>16s} "
            f"{format_currency(point.expense):>16s} {format_currency(point.balance):>16s}"
        )


@summary_group.command("invoices")
@click.argument("year", type=int)
@click.option("--card", help="Credit card name or ID")
@click.pass_context
def invoice_projection(ctx, year: int, card: str | None):
    """Show credit-card purchases per billing month of a year."""
    repo = ctx.obj["repo"]
    card_id = None
    if card:
        try:
            card_id = resolve_entity(PaymentMethodService(repo).list_credit_cards(), card, "Credit card").id
        except DomainError as e:
            handle_domain_error(ctx, e)

    projections = SummaryService(repo).card_invoice_projection(year, card_id=card_id)
    if not projections:
        click.echo("No credit-card purchases found.")
        return

    for projection in projections:
        click.echo(
            f"{month_abbreviation(projection.month, ctx.obj['locale'])} {year}: "
            f"{format_currency(projection.total):>16s} ({projection.count} purchase(s))"
        )


def register_commands(cli):
    """Register summary commands with main CLI."""
    cli.add_command(summary_group, name="summary")
