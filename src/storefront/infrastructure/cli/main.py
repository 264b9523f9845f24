import click

from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_preview,
    cart_remove,
    cart_show,
    cart_update,
)
from storefront.infrastructure.cli.common import container, reported_errors
from storefront.infrastructure.cli.order_commands import (
    order_advance,
    order_create,
    order_list,
    order_show,
)
from storefront.infrastructure.cli.product_commands import (
    category_add,
    category_list,
    product_add,
    product_delete,
    product_list,
    product_show,
    product_update,
)
from storefront.infrastructure.cli.review_commands import (
    review_delete,
    review_list,
    review_submit,
    review_update,
)
from storefront.infrastructure.config import Settings, configure_logging


@click.group()
def cli() -> None:
    """Storefront: catalog, cart and order engine."""
    with reported_errors():
        configure_logging(Settings.from_env().log_level)


@cli.group()
def db() -> None:
    """Manage the database."""


@cli.group()
def category() -> None:
    """Manage categories."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def cart() -> None:
    """Manage a user's cart."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def review() -> None:
    """Manage reviews."""


@db.command("init")
def db_init() -> None:
    """Create any missing tables."""
    container()
    click.echo("Database ready.")


@cli.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", type=int, default=8000, show_default=True)
def serve(host: str, port: int) -> None:
    """Run the HTTP API."""
    import uvicorn

    from storefront.infrastructure.http.app import create_app

    deps = container()
    uvicorn.run(create_app(deps), host=host, port=port, log_level=deps.settings.log_level.lower())


# Register subcommands
category.add_command(category_add)
category.add_command(category_list)
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_show)
product.add_command(product_update)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_preview)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
order.add_command(order_advance)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
review.add_command(review_delete)
review.add_command(review_list)
review.add_command(review_submit)
review.add_command(review_update)
