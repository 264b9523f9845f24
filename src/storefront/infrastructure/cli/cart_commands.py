"""CLI commands for a user's cart."""

from __future__ import annotations

import click

from storefront.application.cart import (
    AddToCartHandler,
    ClearCartHandler,
    RemoveCartItemHandler,
    ShowCartHandler,
    UpdateCartItemHandler,
)
from storefront.application.checkout import PreviewCheckoutHandler
from storefront.application.dto import CartDTO
from storefront.infrastructure.cli.common import container, money, reported_errors

user_option = click.option("--user", "user_id", required=True, help="User ID.")
product_option = click.option("--product", "product_id", required=True, help="Product ID.")


def _display_cart(dto: CartDTO) -> None:
    if not dto.items:
        click.echo("Cart is empty.")
        return
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>10}")
    click.echo(f"  {'-'*41}")
    for line in dto.items:
        click.echo(
            f"  {line.product.name:<24} {line.quantity:>5} "
            f"{money(line.product.effective_price):>10}"
        )


@click.command("show")
@user_option
def cart_show(user_id: str) -> None:
    """Show the cart."""
    with reported_errors():
        dto = ShowCartHandler(container().uow()).handle(user_id)
    _display_cart(dto)


@click.command("add")
@user_option
@product_option
@click.option("--quantity", type=int, default=1, show_default=True)
def cart_add(user_id: str, product_id: str, quantity: int) -> None:
    """Add a product to the cart, merging with an existing line."""
    with reported_errors():
        dto = AddToCartHandler(container().uow()).handle(user_id, product_id, quantity)
    _display_cart(dto)


@click.command("update")
@user_option
@product_option
@click.option("--quantity", type=int, required=True, help="New quantity; 0 removes.")
def cart_update(user_id: str, product_id: str, quantity: int) -> None:
    """Set the quantity of a cart line."""
    with reported_errors():
        dto = UpdateCartItemHandler(container().uow()).handle(user_id, product_id, quantity)
    _display_cart(dto)


@click.command("remove")
@user_option
@product_option
def cart_remove(user_id: str, product_id: str) -> None:
    """Remove a product from the cart."""
    with reported_errors():
        dto = RemoveCartItemHandler(container().uow()).handle(user_id, product_id)
    _display_cart(dto)


@click.command("clear")
@user_option
def cart_clear(user_id: str) -> None:
    """Empty the cart."""
    with reported_errors():
        ClearCartHandler(container().uow()).handle(user_id)
    click.echo("Cart cleared.")


@click.command("preview")
@user_option
def cart_preview(user_id: str) -> None:
    """Price the cart as checkout would, without placing an order."""
    deps = container()
    handler = PreviewCheckoutHandler(deps.uow(), deps.pricing_engine())
    with reported_errors():
        dto = handler.handle(user_id)

    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for line in dto.lines:
        click.echo(
            f"  {line.product_name:<20} {line.quantity:>5} "
            f"{money(line.effective_unit_price):>10} {money(line.line_total):>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Subtotal':<27} {money(dto.subtotal):>20}")
    click.echo(f"  {'Shipping':<27} {money(dto.shipping):>20}")
    click.echo(f"  {'Tax':<27} {money(dto.tax):>20}")
    click.echo(f"  {'Total':<27} {money(dto.total):>20}")
