"""CLI commands for the catalog: categories and products."""

from __future__ import annotations

import click

from storefront.application.add_product import AddProductHandler
from storefront.application.categories import AddCategoryHandler, ListCategoriesHandler
from storefront.application.delete_product import DeleteProductHandler
from storefront.application.dto import ProductDTO
from storefront.application.list_products import ListProductsHandler
from storefront.application.show_product import ShowProductHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.infrastructure.cli.common import container, money, reported_errors


@click.command("add")
@click.option("--name", required=True, help="Category name.")
@click.option("--slug", required=True, help="URL slug (lowercase, hyphens).")
@click.option("--description", default=None, help="Short description.")
@click.option("--featured", is_flag=True, default=False, help="Show on the home page.")
def category_add(name: str, slug: str, description: str | None, featured: bool) -> None:
    """Add a product category."""
    handler = AddCategoryHandler(container().uow())

    with reported_errors():
        dto = handler.handle(name=name, slug=slug, description=description, featured=featured)

    click.echo(f"Category {dto.id} '{dto.name}' added (slug={dto.slug})")


@click.command("list")
@click.option("--featured", is_flag=True, default=False, help="Only featured categories.")
def category_list(featured: bool) -> None:
    """List categories with their product counts."""
    with reported_errors():
        categories = ListCategoriesHandler(container().uow()).handle(featured_only=featured)

    if not categories:
        click.echo("No categories found.")
        return

    click.echo(f"{'Slug':<20} {'Name':<24} {'Products':>8}")
    click.echo("-" * 54)
    for c in categories:
        click.echo(f"{c.slug:<20} {c.name:<24} {c.product_count or 0:>8}")


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", required=True, type=int, help="Units in stock.")
@click.option("--category", "category_id", default=None, help="Category ID.")
@click.option("--description", default="", help="Product description.")
@click.option("--discount", type=int, default=None, help="Sale discount percent.")
@click.option("--on-sale", is_flag=True, default=False, help="Apply the discount.")
@click.option("--id", "product_id", default=None, help="Explicit product ID.")
def product_add(
    name: str,
    price: str,
    stock: int,
    category_id: str | None,
    description: str,
    discount: int | None,
    on_sale: bool,
    product_id: str | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(container().uow())

    with reported_errors():
        product = handler.handle(
            name=name,
            price=price,
            stock=stock,
            category_id=category_id,
            description=description,
            discount=discount,
            on_sale=on_sale,
            product_id=product_id,
        )

    click.echo(
        f"Product {product.id} '{product.name}' added at {money(product.price)} "
        f"({product.stock} in stock)"
    )


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--stock", type=int, default=None, help="New stock level.")
@click.option("--discount", type=int, default=None, help="New discount percent.")
@click.option("--on-sale/--off-sale", default=None, help="Start or end the sale.")
def product_update(
    product_id: str,
    price: str | None,
    stock: int | None,
    discount: int | None,
    on_sale: bool | None,
) -> None:
    """Update a product's price, stock or sale state."""
    handler = UpdateProductHandler(container().uow())
    changes: dict = {"price": price, "stock": stock, "on_sale": on_sale}
    if discount is not None:
        changes["discount"] = discount

    with reported_errors():
        product = handler.handle(product_id=product_id, **changes)

    click.echo(
        f"Product {product.id} updated: {money(product.effective_price)}, "
        f"{product.stock} in stock"
    )


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.confirmation_option(prompt="Delete this product and its reviews?")
def product_delete(product_id: str) -> None:
    """Remove a product from the catalog."""
    with reported_errors():
        DeleteProductHandler(container().uow()).handle(product_id)

    click.echo(f"Product {product_id} deleted.")


@click.command("list")
@click.option("--category", "category_id", default=None, help="Filter by category ID.")
@click.option("--search", default=None, help="Match name or description.")
@click.option("--in-stock", is_flag=True, default=False, help="Only products in stock.")
@click.option("--sort-by", default=None, help="name, price, rating, createdAt or reviewsCount.")
@click.option("--sort-order", default=None, help="asc or desc.")
@click.option("--page", type=int, default=1)
@click.option("--limit", type=int, default=20)
def product_list(
    category_id: str | None,
    search: str | None,
    in_stock: bool,
    sort_by: str | None,
    sort_order: str | None,
    page: int,
    limit: int,
) -> None:
    """List products in the catalog."""
    deps = container()
    handler = ListProductsHandler(
        deps.uow(), deps.settings.sustainability_threshold
    )

    with reported_errors():
        result = handler.handle(
            category_id=category_id,
            search=search,
            in_stock=in_stock,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )

    if not result.products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<38} {'Name':<24} {'Price':>10} {'Stock':>6} {'Rating':>6}")
    click.echo("-" * 88)
    for p in result.products:
        click.echo(
            f"{p.id:<38} {p.name:<24} {money(p.effective_price):>10} "
            f"{p.stock:>6} {p.rating:>6}"
        )
    meta = result.meta
    click.echo(f"Page {meta.page}/{meta.total_pages}  ({meta.total} products)")


def _display_product(p: ProductDTO) -> None:
    click.echo(f"Product {p.id}")
    click.echo(f"Name:     {p.name}")
    click.echo(f"Price:    {money(p.price)}")
    if p.effective_price != p.price:
        click.echo(f"On sale:  {money(p.effective_price)} ({p.discount}% off)")
    click.echo(f"Stock:    {p.stock}")
    click.echo(f"Rating:   {p.rating} ({p.reviews_count} reviews)")
    if p.category_id:
        click.echo(f"Category: {p.category_id}")
    if p.description:
        click.echo()
        click.echo(p.description)


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_show(product_id: str) -> None:
    """Show one product."""
    with reported_errors():
        dto = ShowProductHandler(container().uow()).handle(product_id)

    _display_product(dto)
