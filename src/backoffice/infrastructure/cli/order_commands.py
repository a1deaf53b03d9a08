"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from backoffice.application.create_order import CreateOrderHandler
from backoffice.application.delete_order import DeleteOrderHandler
from backoffice.application.dto import (
    AddressSpec,
    CustomerSpec,
    OrderDTO,
    OrderItemSpec,
    OrderQuery,
)
from backoffice.application.list_customers import ListCustomersHandler
from backoffice.application.list_orders import ListOrdersHandler
from backoffice.application.show_order import ShowOrderHandler
from backoffice.application.update_order_status import UpdateOrderStatusHandler
from backoffice.domain.exceptions import DomainException
from backoffice.infrastructure.cli.context import CliContext


def _parse_item(raw: str) -> OrderItemSpec:
    """Parse 'PRODUCT_ID:COLOR:SIZE:QTY' into an OrderItemSpec."""
    parts = raw.split(":")
    if len(parts) != 4:
        raise click.BadParameter(
            f"Invalid item format '{raw}'. Expected 'ProductId:Color:Size:Quantity'."
        )
    product_id, color, size, qty_str = (p.strip() for p in parts)
    try:
        qty = int(qty_str)
    except ValueError:
        raise click.BadParameter(f"Invalid quantity '{qty_str}' for product '{product_id}'.")
    return OrderItemSpec(product_id=product_id, quantity=qty, color=color, size=size)


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    address = dto.customer.address
    click.echo(f"Order {dto.order_number}  (status={dto.status}, id={dto.id})")
    click.echo(f"Customer: {dto.customer.name} <{dto.customer.email}> {dto.customer.phone}")
    click.echo(
        f"Ship to:  {address.street}, {address.city}, {address.state} "
        f"{address.zip_code}, {address.country}"
    )
    click.echo(f"Payment:  {dto.payment_method} ({dto.payment_status})")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()

    click.echo(f"  {'Product':<20} {'Variant':<12} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*60}")
    for item in dto.items:
        variant = f"{item.color}/{item.size}"
        click.echo(
            f"  {item.product_name:<20} {variant:<12} {item.quantity:>5} "
            f"{item.unit_price:>10.2f} {item.line_total:>10.2f}"
        )
    click.echo(f"  {'-'*60}")
    click.echo(f"  {'Subtotal':<40} {dto.subtotal:>19.2f}")
    click.echo(f"  {'Tax':<40} {dto.tax:>19.2f}")
    click.echo(f"  {'Shipping':<40} {dto.shipping:>19.2f}")
    click.echo(f"  {'Order Total':<40} {dto.total:>19.2f}")


@click.command("create")
@click.option("--name", required=True, help="Customer name.")
@click.option("--email", required=True, help="Customer email.")
@click.option("--phone", required=True, help="Customer phone.")
@click.option("--street", required=True)
@click.option("--city", required=True)
@click.option("--state", required=True)
@click.option("--zip", "zip_code", required=True, help="ZIP / postal code.")
@click.option("--country", default=None)
@click.option(
    "--item",
    "items",
    multiple=True,
    required=True,
    help="Line item as 'ProductId:Color:Size:Qty'. Repeat for more lines.",
)
@click.option("--payment-method", default=None, help="credit_card, paypal, stripe or cash_on_delivery.")
@click.option("--notes", default=None)
@click.pass_obj
def order_create(
    ctx: CliContext,
    name: str,
    email: str,
    phone: str,
    street: str,
    city: str,
    state: str,
    zip_code: str,
    country: str | None,
    items: tuple[str, ...],
    payment_method: str | None,
    notes: str | None,
) -> None:
    """Create a new order and take its stock."""
    specs = [_parse_item(raw) for raw in items]
    customer = CustomerSpec(
        name=name,
        email=email,
        phone=phone,
        address=AddressSpec(
            street=street, city=city, state=state, zip_code=zip_code, country=country
        ),
    )
    handler = CreateOrderHandler(order_repo=ctx.repos.orders, product_repo=ctx.repos.products)

    try:
        dto = handler.handle(
            customer=customer,
            item_specs=specs,
            payment_method=payment_method,
            notes=notes,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} created.")
    _display_order(dto)


@click.command("show")
@click.argument("id_or_number")
@click.pass_obj
def order_show(ctx: CliContext, id_or_number: str) -> None:
    """Show an order by ID or order number."""
    handler = ShowOrderHandler(order_repo=ctx.repos.orders, product_repo=ctx.repos.products)

    try:
        dto = handler.handle(id_or_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--page", default=1, show_default=True, type=int)
@click.option("--limit", default=10, show_default=True, type=int)
@click.option("--status", default=None)
@click.option("--email", "customer_email", default=None, help="Customer email contains.")
@click.option("--sort-by", default="createdAt", show_default=True)
@click.option("--sort-order", type=click.Choice(["asc", "desc"]), default="desc", show_default=True)
@click.pass_obj
def order_list(
    ctx: CliContext,
    page: int,
    limit: int,
    status: str | None,
    customer_email: str | None,
    sort_by: str,
    sort_order: str,
) -> None:
    """List orders, newest first."""
    handler = ListOrdersHandler(
        order_repo=ctx.repos.orders,
        product_repo=ctx.repos.products,
        max_limit=ctx.settings.max_page_limit,
    )
    query = OrderQuery(
        page=page,
        limit=limit,
        status=status,
        customer_email=customer_email,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    try:
        result = handler.handle(query)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Number':<16} {'Status':<12} {'Customer':<28} {'Total':>10}")
    click.echo("-" * 69)
    for o in result.orders:
        click.echo(
            f"{o.order_number:<16} {o.status:<12} {o.customer.email:<28} {o.total:>10.2f}"
        )
    p = result.pagination
    click.echo(f"Page {p.page} of {p.total_pages} ({p.total} orders)")


@click.command("status")
@click.argument("order_id")
@click.argument("status")
@click.pass_obj
def order_status(ctx: CliContext, order_id: str, status: str) -> None:
    """Move an order to a new status."""
    handler = UpdateOrderStatusHandler(
        order_repo=ctx.repos.orders,
        product_repo=ctx.repos.products,
        strict_transitions=ctx.settings.strict_status_transitions,
    )

    try:
        dto = handler.handle(order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} is now {dto.status}.")


@click.command("delete")
@click.argument("order_id")
@click.confirmation_option(prompt="Delete this order?")
@click.pass_obj
def order_delete(ctx: CliContext, order_id: str) -> None:
    """Delete an order (cancelled/refunded orders return their stock)."""
    handler = DeleteOrderHandler(order_repo=ctx.repos.orders, product_repo=ctx.repos.products)

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} deleted.")


@click.command("customers")
@click.pass_obj
def order_customers(ctx: CliContext) -> None:
    """List customers derived from the order book."""
    customers = ListCustomersHandler(order_repo=ctx.repos.orders).handle()

    if not customers:
        click.echo("No customers found.")
        return

    click.echo(f"{'Email':<30} {'Name':<20} {'Orders':>6} {'Spent':>10}")
    click.echo("-" * 69)
    for c in customers:
        click.echo(f"{c.email:<30} {c.name:<20} {c.total_orders:>6} {c.total_spent:>10.2f}")
