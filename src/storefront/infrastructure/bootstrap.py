"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from storefront.domain.service.pricing import PricingEngine
from storefront.domain.unit_of_work import UnitOfWork
from storefront.infrastructure.config import Settings
from storefront.infrastructure.persistence.sqlalchemy.database import (
    create_session_factory,
    create_store_engine,
    init_schema,
)
from storefront.infrastructure.persistence.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
)


@dataclass
class Container:
    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]

    def uow(self) -> UnitOfWork:
        return SqlAlchemyUnitOfWork(self.session_factory)

    def pricing_engine(self) -> PricingEngine:
        return PricingEngine(self.settings.pricing)

    def init_schema(self) -> None:
        init_schema(self.engine)


UowFactory = Callable[[], UnitOfWork]


def build(settings: Settings | None = None) -> Container:
    settings = settings or Settings.from_env()
    engine = create_store_engine(settings.database_url)
    return Container(
        settings=settings,
        engine=engine,
        session_factory=create_session_factory(engine),
    )
