"""CLI commands for product reviews."""

from __future__ import annotations

import click

from storefront.application.reviews import (
    DeleteReviewHandler,
    ListReviewsHandler,
    SubmitReviewHandler,
    UpdateReviewHandler,
)
from storefront.infrastructure.cli.common import container, reported_errors

user_option = click.option("--user", "user_id", required=True, help="Reviewer's user ID.")
product_option = click.option("--product", "product_id", required=True, help="Product ID.")


def _content_options(func):
    func = click.option("--comment", required=True)(func)
    func = click.option("--title", required=True)(func)
    func = click.option("--rating", type=click.IntRange(1, 5), required=True)(func)
    return func


@click.command("submit")
@user_option
@product_option
@_content_options
def review_submit(user_id: str, product_id: str, rating: int, title: str, comment: str) -> None:
    """Review a product (once per user)."""
    with reported_errors():
        dto = SubmitReviewHandler(container().uow()).handle(
            product_id, user_id, rating, title, comment
        )
    click.echo(f"Review #{dto.id} submitted ({dto.rating}/5).")


@click.command("update")
@user_option
@product_option
@_content_options
def review_update(user_id: str, product_id: str, rating: int, title: str, comment: str) -> None:
    """Rewrite your review of a product."""
    with reported_errors():
        dto = UpdateReviewHandler(container().uow()).handle(
            product_id, user_id, rating, title, comment
        )
    click.echo(f"Review #{dto.id} updated ({dto.rating}/5).")


@click.command("delete")
@user_option
@product_option
def review_delete(user_id: str, product_id: str) -> None:
    """Delete your review of a product."""
    with reported_errors():
        DeleteReviewHandler(container().uow()).handle(product_id, user_id)
    click.echo("Review deleted.")


@click.command("list")
@product_option
@click.option("--page", type=int, default=1)
@click.option("--limit", type=int, default=10)
def review_list(product_id: str, page: int, limit: int) -> None:
    """List a product's reviews, most helpful first."""
    with reported_errors():
        result = ListReviewsHandler(container().uow()).handle(product_id, page, limit)

    if not result.reviews:
        click.echo("No reviews yet.")
        return

    for r in result.reviews:
        click.echo(f"[{r.rating}/5] {r.title}  by {r.user_id}  ({r.helpful} found helpful)")
        click.echo(f"    {r.comment}")
