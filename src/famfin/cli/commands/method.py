"""Payment method management commands."""

import click
from famfin.cli.error_handling import handle_domain_error
from famfin.cli.resolution import resolve_entity
from famfin.domain.account import AccountService
from famfin.domain.entities import PaymentMethod, PaymentMethodKind, TransactionType
from famfin.domain.errors import DependencyError, DomainError, delete_blocked
from famfin.domain.payment_method import PaymentMethodService

KIND_CHOICES = {
    "cash": PaymentMethodKind.CASH,
    "pix": PaymentMethodKind.PIX,
    "credit-card": PaymentMethodKind.CREDIT_CARD,
    "boleto": PaymentMethodKind.BOLETO,
    "other": PaymentMethodKind.OTHER,
}


@click.group()
def method_group():
    """Manage payment methods and credit cards."""
    pass


@method_group.command("create")
@click.argument("name")
@click.option(
    "--kind",
    type=click.Choice(sorted(KIND_CHOICES), case_sensitive=False),
    default="other",
    show_default=True,
    help="Payment method kind",
)
@click.option("--income", is_flag=True, help="Method used to receive income")
@click.option("--linked-account", help="Bank account paying the card's invoices (name or ID)")
@click.pass_context
def create_method(ctx, name: str, kind: str, income: bool, linked_account: str | None):
    """Create a payment method.

    Examples:
        famfin method create "Visa" --kind credit-card --linked-account "Checking"
        famfin method create "Pix" --kind pix --income
    """
    repo = ctx.obj["repo"]
    service = PaymentMethodService(repo)

    linked_id = None
    if linked_account:
        try:
            linked_id = resolve_entity(AccountService(repo).list_accounts(), linked_account, "Account").id
        except DomainError as e:
            handle_domain_error(ctx, e)

    method = service.save_payment_method(
        PaymentMethod(
            id="",
            name=name,
            type=TransactionType.INCOME if income else TransactionType.EXPENSE,
            kind=KIND_CHOICES[kind.lower()],
            linked_bank_account_id=linked_id,
        )
    )
    click.echo(f"Created payment method '{name}' (ID: {method.id})")


@method_group.command("list")
@click.pass_context
def list_methods(ctx):
    """List payment methods."""
    repo = ctx.obj["repo"]
    methods = PaymentMethodService(repo).list_payment_methods()
    accounts = {a.id: a.name for a in AccountService(repo).list_accounts()}

    if not methods:
        click.echo("No payment methods found.")
        return

    for m in methods:
        line = f"ID: {m.id:>12s} | {m.name:20s} | {m.kind.value:10s} | {m.type.value}"
        if m.linked_bank_account_id:
            line += f" | pays from: {accounts.get(m.linked_bank_account_id, m.linked_bank_account_id)}"
        click.echo(line)


@method_group.command("link")
@click.argument("method")
@click.argument("account")
@click.pass_context
def link_method(ctx, method: str, account: str):
    """Link a card to the bank account that pays its invoices."""
    repo = ctx.obj["repo"]
    service = PaymentMethodService(repo)
    try:
        method_obj = resolve_entity(service.list_payment_methods(), method, "Payment method")
        account_obj = resolve_entity(AccountService(repo).list_accounts(), account, "Account")
        service.link_account(method_obj.id, account_obj.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Linked '{method_obj.name}' to account '{account_obj.name}'")


@method_group.command("unlink")
@click.argument("method")
@click.pass_context
def unlink_method(ctx, method: str):
    """Remove the bank account link of a card."""
    service = PaymentMethodService(ctx.obj["repo"])
    try:
        method_obj = resolve_entity(service.list_payment_methods(), method, "Payment method")
        service.link_account(method_obj.id, None)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Unlinked '{method_obj.name}'")


@method_group.command("delete")
@click.argument("method")
@click.pass_context
def delete_method(ctx, method: str):
    """Delete a payment method that no transaction uses."""
    service = PaymentMethodService(ctx.obj["repo"])
    try:
        method_obj = resolve_entity(service.list_payment_methods(), method, "Payment method")
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not service.delete_payment_method(method_obj.id):
        handle_domain_error(
            ctx, DependencyError(delete_blocked("payment method", f"'{method_obj.name}'"))
        )

    click.echo(f"Deleted payment method '{method_obj.name}'")


def register_commands(cli):
    """Register payment method commands with main CLI."""
    cli.add_command(method_group, name="method")
