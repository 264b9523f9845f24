"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.advance_order_status import AdvanceOrderStatusHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.dto import OrderDTO
from storefront.application.list_orders import ListAllOrdersHandler, ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.model.value_objects import ShippingAddress
from storefront.infrastructure.cli.common import container, money, reported_errors


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"User:     {dto.user_id}")
    click.echo(f"Created:  {dto.created_at}")
    address = dto.shipping_address
    click.echo(f"Ship to:  {address['full_name']}, {address['city']}, {address['country']}")
    click.echo(f"Payment:  {dto.payment_method}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} "
            f"{money(item.unit_price):>10} {money(item.line_total):>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Subtotal':<27} {money(dto.subtotal):>20}")
    click.echo(f"  {'Shipping':<27} {money(dto.shipping):>20}")
    click.echo(f"  {'Tax':<27} {money(dto.tax):>20}")
    click.echo(f"  {'Order Total':<27} {money(dto.total):>20}")


@click.command("create")
@click.option("--user", "user_id", required=True, help="User placing the order.")
@click.option("--full-name", required=True)
@click.option("--address", required=True)
@click.option("--city", required=True)
@click.option("--state", required=True)
@click.option("--zip", "zip_code", required=True)
@click.option("--country", required=True)
@click.option("--phone", default=None)
@click.option("--payment", "payment_method", required=True, help="Payment method label.")
def order_create(
    user_id: str,
    full_name: str,
    address: str,
    city: str,
    state: str,
    zip_code: str,
    country: str,
    phone: str | None,
    payment_method: str,
) -> None:
    """Check out the user's cart as a new order."""
    deps = container()
    handler = CreateOrderHandler(deps.uow(), deps.pricing_engine())

    with reported_errors():
        shipping = ShippingAddress(
            full_name=full_name,
            address=address,
            city=city,
            state=state,
            zip_code=zip_code,
            country=country,
            phone=phone,
        )
        dto = handler.handle(
            user_id=user_id, shipping_address=shipping, payment_method=payment_method
        )

    click.echo(f"Order #{dto.id} created  (status={dto.status})")
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.option("--user", "user_id", default=None, help="Show as this user (owner check).")
def order_show(order_id: int, user_id: str | None) -> None:
    """Show details of an existing order.

    Without --user the operator sees any order.
    """
    handler = ShowOrderHandler(container().uow())

    with reported_errors():
        dto = handler.handle(order_id, user_id or "", privileged=user_id is None)

    _display_order(dto)


@click.command("list")
@click.option("--user", "user_id", default=None, help="Only this user's orders.")
@click.option("--status", default=None, help="Filter by status (all users only).")
@click.option("--page", type=int, default=1)
@click.option("--limit", type=int, default=10)
def order_list(user_id: str | None, status: str | None, page: int, limit: int) -> None:
    """List orders, newest first."""
    deps = container()

    with reported_errors():
        if user_id:
            result = ListOrdersHandler(deps.uow()).handle(user_id, page=page, limit=limit)
        else:
            result = ListAllOrdersHandler(deps.uow()).handle(
                status=status, page=page, limit=limit
            )

    if not result.orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':>6} {'User':<16} {'Status':<12} {'Total':>10}  Created")
    click.echo("-" * 72)
    for o in result.orders:
        click.echo(
            f"{o.id:>6} {o.user_id:<16} {o.status:<12} {money(o.total):>10}  {o.created_at}"
        )
    meta = result.meta
    click.echo(f"Page {meta.page}/{meta.total_pages}  ({meta.total} orders)")


@click.command("advance")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--status", required=True, help="Target status, e.g. PROCESSING.")
def order_advance(order_id: int, status: str) -> None:
    """Move an order along its status graph (CANCELLED restocks)."""
    handler = AdvanceOrderStatusHandler(container().uow())

    with reported_errors():
        dto = handler.handle(order_id, status)

    click.echo(f"Order #{order_id} is now {dto.status}.")
