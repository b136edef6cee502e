"""Category management commands."""

import click
from forecastit.cli.error_handling import handle_domain_error
from forecastit.domain.category import CategoryService
from forecastit.domain.entities import COLORS


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List category groups with their categories."""
    service = CategoryService(ctx.obj["db"])

    groups = service.list_groups()
    if not groups:
        click.echo("No categories found. Use 'category create-group' to add one.")
        return

    click.echo("\nCategories:")
    for group in groups:
        click.echo(f"{group.name} [{group.color}] (ID: {group.id})")
        for cat in service.list_categories(group_id=group.id):
            click.echo(f"  {cat.name} (ID: {cat.id})")


@category_group.command("create-group")
@click.argument("name")
@click.option("--color", type=click.Choice(COLORS), default="slate", help="Display color (default: slate)")
@click.option("--order", "display_order", type=int, default=0, help="Sort position (default: 0)")
@click.pass_context
def create_group(ctx, name: str, color: str, display_order: int):
    """Create a new category group."""
    service = CategoryService(ctx.obj["db"])
    try:
        group_id = service.create_group(name=name, color=color, display_order=display_order)
        click.echo(f"Created category group '{name.strip()}' (ID: {group_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@category_group.command("create")
@click.argument("name")
@click.option("--group", "group_name", required=True, help="Category group name (e.g., 'Housing')")
@click.option("--order", "display_order", type=int, default=0, help="Sort position (default: 0)")
@click.pass_context
def create_category(ctx, name: str, group_name: str, display_order: int):
    """Create a new category inside a group."""
    service = CategoryService(ctx.obj["db"])
    try:
        category_id = service.create_category(name=name, group_name=group_name, display_order=display_order)
        click.echo(f"Created category '{group_name} > {name.strip()}' (ID: {category_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
