"""Helpers shared by the CLI command modules."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import click
from sqlalchemy.exc import SQLAlchemyError

from storefront.domain.exceptions import DomainException, StoreUnavailableError
from storefront.infrastructure.bootstrap import Container, build


def container() -> Container:
    """Build the object graph, creating missing tables on first use."""
    with reported_errors():
        deps = build()
    try:
        deps.init_schema()
    except SQLAlchemyError as exc:
        raise click.ClickException(f"Cannot open the database: {exc}") from exc
    return deps


@contextmanager
def reported_errors() -> Iterator[None]:
    """Turn business and store errors into a clean CLI failure."""
    try:
        yield
    except (DomainException, StoreUnavailableError) as exc:
        raise click.ClickException(str(exc)) from exc


def money(value: str) -> str:
    return f"${value}"
