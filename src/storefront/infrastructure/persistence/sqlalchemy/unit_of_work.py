"""Unit of work over one SQLAlchemy session."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from storefront.domain.exceptions import StoreUnavailableError
from storefront.domain.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.sqlalchemy.repositories import (
    SqlAlchemyCartRepository,
    SqlAlchemyCategoryRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyReviewRepository,
)

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Opens a fresh session per ``with`` block.

    Database faults surface as :class:`StoreUnavailableError` after the
    session has been rolled back, so callers never see a driver error.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            super().__exit__(exc_type, exc, tb)
        except SQLAlchemyError as err:
            logger.error("transaction failed to complete: %s", err)
            raise StoreUnavailableError(
                "The data store is unavailable; no changes were applied"
            ) from err
        if exc_type is not None and issubclass(exc_type, SQLAlchemyError):
            logger.error("database error inside unit of work: %s", exc)
            raise StoreUnavailableError(
                "The data store is unavailable; no changes were applied"
            ) from exc

    def _begin(self) -> None:
        session = self._session_factory()
        self._session = session
        self.products = SqlAlchemyProductRepository(session)
        self.categories = SqlAlchemyCategoryRepository(session)
        self.carts = SqlAlchemyCartRepository(session)
        self.orders = SqlAlchemyOrderRepository(session)
        self.reviews = SqlAlchemyReviewRepository(session)

    def _end(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        logger.debug("rolling back unit of work")
        self._session.rollback()
