import click

from backoffice.infrastructure.bootstrap import build_repositories
from backoffice.infrastructure.cli.catalog_commands import (
    category_add,
    category_list,
    product_add,
    product_list,
    product_price,
    product_stock,
)
from backoffice.infrastructure.cli.context import CliContext
from backoffice.infrastructure.cli.order_commands import (
    order_create,
    order_customers,
    order_delete,
    order_list,
    order_show,
    order_status,
)
from backoffice.infrastructure.cli.user_commands import serve, user_create_admin, user_token
from backoffice.infrastructure.config import Settings
from backoffice.infrastructure.logging import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Store back-office: orders, catalog and reporting."""
    if ctx.obj is None:
        settings = Settings.from_env()
        configure_logging(settings)
        ctx.obj = CliContext(settings=settings, repos=build_repositories(settings))


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def category() -> None:
    """Manage categories."""


@cli.group()
def user() -> None:
    """Manage back-office users."""


# Register subcommands
cli.add_command(serve)
order.add_command(order_create)
order.add_command(order_show)
order.add_command(order_list)
order.add_command(order_status)
order.add_command(order_delete)
order.add_command(order_customers)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_price)
product.add_command(product_stock)
category.add_command(category_add)
category.add_command(category_list)
user.add_command(user_create_admin)
user.add_command(user_token)
