"""Transaction commands."""

import click
from famfin.cli.error_handling import handle_domain_error
from famfin.cli.resolution import resolve_entity
from famfin.domain.account import AccountService
from famfin.domain.category import CategoryService
from famfin.domain.entities import Transaction, TransactionStatus, TransactionType
from famfin.domain.errors import DomainError, transaction_not_found
from famfin.domain.payment_method import PaymentMethodService
from famfin.domain.transaction import TransactionService
from famfin.utils.amount_parser import format_currency, parse_currency
from famfin.utils.date_parser import parse_date


def _format_row(txn: Transaction, category_names: dict[str, str]) -> str:
    sign = "+" if txn.type == TransactionType.INCOME else "-"
    return (
        f"{txn.id:>34s} | {txn.date} | {txn.description[:30]:30s} | "
        f"{category_names.get(txn.category_id, '?'):15s} | "
        f"{sign}{format_currency(txn.value):>14s} | {txn.status.value}"
    )


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--date", "date_str", default="today", help="Date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--value", required=True, help="Value (e.g., '1.234,56'); always positive")
@click.option("--category", required=True, help="Category name or ID")
@click.option("--account", required=True, help="Bank account name or ID")
@click.option("--method", required=True, help="Payment method name or ID")
@click.option("--description", default="", help="Description")
@click.option("--income", is_flag=True, help="Record income instead of an expense")
@click.option("--projected", is_flag=True, help="Mark as projected instead of paid")
@click.option("--installments", type=int, default=1, show_default=True, help="Credit-card installments")
@click.option("--notes", help="Notes")
@click.pass_context
def add_transaction(
    ctx,
    date_str: str,
    value: str,
    category: str,
    account: str,
    method: str,
    description: str,
    income: bool,
    projected: bool,
    installments: int,
    notes: str | None,
):
    """Add a transaction.

    Examples:
        famfin tx add --value "300,00" --category Food --account Checking --method Visa
        famfin tx add --value "1.200,00" --category Leisure --account Checking \\
            --method Visa --installments 12 --description "Laptop"
    """
    repo = ctx.obj["repo"]
    service = TransactionService(repo)
    txn_type = TransactionType.INCOME if income else TransactionType.EXPENSE

    try:
        txn_date = parse_date(date_str)
        category_obj = resolve_entity(
            CategoryService(repo).list_categories(), category, "Category",
            accept=lambda c: c.type == txn_type,
        )
        account_obj = resolve_entity(AccountService(repo).list_accounts(), account, "Account")
        method_obj = resolve_entity(
            PaymentMethodService(repo).list_payment_methods(), method, "Payment method",
            accept=lambda m: m.type == txn_type,
        )
        txn = Transaction(
            id="",
            date=txn_date,
            description=description,
            category_id=category_obj.id,
            bank_account_id=account_obj.id,
            type=txn_type,
            value=parse_currency(value),
            payment_method_id=method_obj.id,
            status=TransactionStatus.PROJECTED if projected else TransactionStatus.PAID,
            notes=notes,
            installments=installments if installments > 1 else None,
        )
        service.validate_transaction(txn)
        saved = service.save_transaction(txn)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    if len(saved) > 1:
        click.echo(f"Created {len(saved)} installments of {format_currency(saved[0].value)}")
    else:
        click.echo(f"Created transaction {saved[0].id}")
    click.echo(f"  Date: {txn_date}")
    click.echo(f"  Value: {format_currency(txn.value)}")
    click.echo(f"  Category: {category_obj.name}")
    click.echo(f"  Method: {method_obj.name}")


@transaction_group.command("list")
@click.option("--month", type=click.IntRange(1, 12), help="Month (1-12)")
@click.option("--year", type=int, help="Year")
@click.option("--account", help="Bank account name or ID")
@click.option("--hide-invoices", is_flag=True, help="Leave out generated card invoices")
@click.pass_context
def list_transactions(ctx, month: int | None, year: int | None, account: str | None, hide_invoices: bool):
    """List transactions, newest first."""
    repo = ctx.obj["repo"]
    account_id = None
    if account:
        try:
            account_id = resolve_entity(AccountService(repo).list_accounts(), account, "Account").id
        except DomainError as e:
            handle_domain_error(ctx, e)

    transactions = TransactionService(repo).list_transactions(
        month=month,
        year=year,
        bank_account_id=account_id,
        include_auto_invoices=not hide_invoices,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    names = {c.id: c.name for c in CategoryService(repo).list_categories()}
    for txn in transactions:
        click.echo(_format_row(txn, names))


@transaction_group.command("search")
@click.argument("term")
@click.pass_context
def search_transactions(ctx, term: str):
    """Search descriptions and notes."""
    repo = ctx.obj["repo"]
    results = TransactionService(repo).search_transactions(term)
    if not results:
        click.echo("No matching transactions.")
        return

    names = {c.id: c.name for c in CategoryService(repo).list_categories()}
    for txn in results:
        click.echo(_format_row(txn, names))
    click.echo(f"\n{len(results)} transaction(s)")


@transaction_group.command("toggle")
@click.argument("transaction_id")
@click.pass_context
def toggle_transaction(ctx, transaction_id: str):
    """Switch a transaction between Paid and Projected."""
    service = TransactionService(ctx.obj["repo"])
    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: {transaction_not_found(transaction_id)}", err=True)
        ctx.exit(1)

    try:
        updated = service.toggle_status(txn)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Transaction {transaction_id} is now {updated.status.value}")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--all-next", is_flag=True, help="Also delete the later installments of the purchase")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, all_next: bool, yes: bool):
    """Delete a transaction."""
    service = TransactionService(ctx.obj["repo"])
    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: {transaction_not_found(transaction_id)}", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Delete transaction '{txn.description}' ({txn.date})?"):
        click.echo("Deletion cancelled.")
        return

    service.delete_transaction(transaction_id, delete_all_next=all_next)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="tx")
