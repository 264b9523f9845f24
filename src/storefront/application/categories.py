"""Application services: Category use cases (add, list, show by slug)."""

from __future__ import annotations

import logging
import uuid

from storefront.application.dto import CategoryDTO, category_to_dto
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.product import Category
from storefront.domain.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class AddCategoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        name: str,
        slug: str,
        description: str | None = None,
        image: str | None = None,
        featured: bool = False,
        category_id: str | None = None,
    ) -> CategoryDTO:
        category = Category.create(
            id=category_id or str(uuid.uuid4()),
            slug=slug,
            name=name,
            description=description,
            image=image,
            featured=featured,
        )
        with self._uow as uow:
            if uow.categories.get_by_name(category.name) is not None:
                raise ValidationError(f"Category '{category.name}' already exists")
            if uow.categories.get_by_slug(category.slug) is not None:
                raise ValidationError(f"Category slug '{category.slug}' already exists")
            uow.categories.add(category)

        logger.info("category %s added: %s", category.id, category.slug)
        return category_to_dto(category, product_count=0)


class ListCategoriesHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, featured_only: bool = False) -> list[CategoryDTO]:
        with self._uow as uow:
            rows = uow.categories.list_all(featured_only=featured_only)
        return [category_to_dto(category, count) for category, count in rows]


class ShowCategoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, slug: str) -> CategoryDTO:
        with self._uow as uow:
            category = uow.categories.get_by_slug(slug.strip().lower())
            if category is None:
                raise EntityNotFoundError(f"Category '{slug}' not found")
            count = next(
                (n for c, n in uow.categories.list_all() if c.id == category.id), 0
            )
        return category_to_dto(category, count)
