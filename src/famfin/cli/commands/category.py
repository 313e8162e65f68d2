"""Category management commands."""

import click
from famfin.cli.error_handling import handle_domain_error
from famfin.cli.resolution import resolve_entity
from famfin.domain.category import CategoryService
from famfin.domain.entities import Category, TransactionType
from famfin.domain.errors import ConflictError, DependencyError, DomainError, delete_blocked

TYPE_CHOICES = {"income": TransactionType.INCOME, "expense": TransactionType.EXPENSE}


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("create")
@click.argument("name")
@click.option(
    "--type",
    "category_type",
    type=click.Choice(sorted(TYPE_CHOICES), case_sensitive=False),
    default="expense",
    show_default=True,
    help="Category type",
)
@click.pass_context
def create_category(ctx, name: str, category_type: str):
    """Create a new category.

    Examples:
        famfin category create "Groceries"
        famfin category create "Freelance" --type income
    """
    service = CategoryService(ctx.obj["repo"])

    if service.get_category_by_name(name) is not None:
        handle_domain_error(ctx, ConflictError(f"Category '{name}' already exists"))

    category = service.save_category(
        Category(id="", name=name, type=TYPE_CHOICES[category_type.lower()])
    )
    click.echo(f"Created category '{name}' (ID: {category.id})")


@category_group.command("list")
@click.option(
    "--type",
    "category_type",
    type=click.Choice(sorted(TYPE_CHOICES), case_sensitive=False),
    help="Only list one type",
)
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List categories."""
    service = CategoryService(ctx.obj["repo"])
    wanted = TYPE_CHOICES[category_type.lower()] if category_type else None
    categories = service.list_categories(type=wanted)

    if not categories:
        click.echo("No categories found.")
        return

    for cat in categories:
        click.echo(f"ID: {cat.id:>12s} | {cat.name:30s} | {cat.type.value}")


@category_group.command("delete")
@click.argument("category")
@click.pass_context
def delete_category(ctx, category: str):
    """Delete a category that no transaction uses.

    CATEGORY can be a category name or ID.
    """
    service = CategoryService(ctx.obj["repo"])

    try:
        cat = resolve_entity(service.list_categories(), category, "Category")
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not service.delete_category(cat.id):
        handle_domain_error(ctx, DependencyError(delete_blocked("category", f"'{cat.name}'")))

    click.echo(f"Deleted category '{cat.name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
