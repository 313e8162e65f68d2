"""Bank account management commands."""

import click
from famfin.cli.error_handling import handle_domain_error
from famfin.cli.resolution import resolve_entity
from famfin.domain.account import AccountService
from famfin.domain.entities import BankAccount
from famfin.domain.errors import ConflictError, DependencyError, DomainError, delete_blocked
from famfin.domain.summary import SummaryService
from famfin.utils.amount_parser import format_currency, parse_currency


@click.group()
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--initial-balance", default="0", help="Opening balance (e.g., '1.234,56')")
@click.pass_context
def create_account(ctx, name: str, initial_balance: str):
    """Create a new bank account.

    Examples:
        famfin account create "Checking"
        famfin account create "Savings" --initial-balance "5.000,00"
    """
    service = AccountService(ctx.obj["repo"])

    if any(acc.name.lower() == name.lower() for acc in service.list_accounts()):
        handle_domain_error(ctx, ConflictError(f"Account with name '{name}' already exists"))

    account = service.save_account(
        BankAccount(id="", name=name, initial_balance=parse_currency(initial_balance))
    )
    click.echo(f"Created account '{name}' (ID: {account.id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their balances."""
    summaries = SummaryService(ctx.obj["repo"]).bank_account_summaries()
    if not summaries:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 78)
    for summary in summaries:
        click.echo(
            f"ID: {summary.id:>12s} | {summary.name:20s} | "
            f"Confirmed: {format_currency(summary.confirmed_balance):>15s} | "
            f"Projected: {format_currency(summary.current_balance):>15s}"
        )


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def delete_account(ctx, account: str) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID. The account can only be deleted
    if no transaction is booked to it.
    """
    service = AccountService(ctx.obj["repo"])

    try:
        account_obj = resolve_entity(service.list_accounts(), account, "Account")
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not service.delete_account(account_obj.id):
        handle_domain_error(ctx, DependencyError(delete_blocked("account", f"'{account_obj.name}'")))

    click.echo(f"Deleted account '{account_obj.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
