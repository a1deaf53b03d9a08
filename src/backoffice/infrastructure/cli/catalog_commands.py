"""CLI commands for products and categories."""

from __future__ import annotations

import click

from backoffice.application.add_category import AddCategoryHandler
from backoffice.application.add_product import AddProductHandler
from backoffice.application.list_products import ListProductsHandler
from backoffice.application.set_stock import SetStockHandler
from backoffice.application.update_product import UpdateProductHandler
from backoffice.domain.exceptions import DomainException
from backoffice.infrastructure.cli.context import CliContext


def _parse_stock(raw: str) -> tuple[str, str, int]:
    """Parse 'COLOR:SIZE:QTY'."""
    parts = raw.split(":")
    if len(parts) != 3:
        raise click.BadParameter(f"Invalid stock format '{raw}'. Expected 'Color:Size:Quantity'.")
    color, size, qty_str = (p.strip() for p in parts)
    try:
        return color, size, int(qty_str)
    except ValueError:
        raise click.BadParameter(f"Invalid quantity '{qty_str}' for {color}/{size}.")


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--category", "category_id", required=True, help="Category ID.")
@click.option("--stock", "stock", multiple=True, help="Variant as 'Color:Size:Qty'. Repeatable.")
@click.option("--sku", default=None)
@click.pass_obj
def product_add(
    ctx: CliContext,
    name: str,
    price: str,
    category_id: str,
    stock: tuple[str, ...],
    sku: str | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(
        product_repo=ctx.repos.products, category_repo=ctx.repos.categories
    )

    try:
        product = handler.handle(
            name=name,
            price=price,
            category_id=category_id,
            stock=[_parse_stock(raw) for raw in stock],
            sku=sku,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' added at ${product.price:.2f}")


@click.command("list")
@click.option("--category", "category_id", default=None, help="Only this category.")
@click.pass_obj
def product_list(ctx: CliContext, category_id: str | None) -> None:
    """List all products in the catalog."""
    products = ListProductsHandler(ctx.repos.products).handle(category_id=category_id)

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<26} {'Name':<20} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 65)
    for p in products:
        click.echo(f"{p.id:<26} {p.name:<20} {p.price:>10.2f} {p.total_stock:>6}")
        for entry in p.stock:
            click.echo(f"{'':<26}   {entry.color}/{entry.size}: {entry.quantity}")


@click.command("price")
@click.argument("product_id")
@click.argument("price")
@click.pass_obj
def product_price(ctx: CliContext, product_id: str, price: str) -> None:
    """Update a product's price."""
    handler = UpdateProductHandler(product_repo=ctx.repos.products)

    try:
        product = handler.handle(product_id=product_id, new_price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} price updated to ${product.price:.2f}")


@click.command("stock")
@click.argument("product_id")
@click.option("--color", required=True)
@click.option("--size", required=True)
@click.option("--quantity", required=True, type=int)
@click.pass_obj
def product_stock(ctx: CliContext, product_id: str, color: str, size: str, quantity: int) -> None:
    """Set the on-hand quantity of one variant."""
    handler = SetStockHandler(product_repo=ctx.repos.products)

    try:
        product = handler.handle(product_id, color, size, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{product.name} {color}/{size} stock set to {quantity}")


@click.command("add")
@click.argument("name")
@click.pass_obj
def category_add(ctx: CliContext, name: str) -> None:
    """Add a product category."""
    try:
        category = AddCategoryHandler(ctx.repos.categories).handle(name)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Category {category.id} '{category.name}' added")


@click.command("list")
@click.pass_obj
def category_list(ctx: CliContext) -> None:
    """List categories."""
    categories = ctx.repos.categories.list_all()
    if not categories:
        click.echo("No categories found.")
        return
    for c in sorted(categories, key=lambda c: c.name.lower()):
        click.echo(f"{c.id:<26} {c.name}")
