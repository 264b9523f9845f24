"""HTTP routes.

Every route builds its handler from the container stored on the app,
runs it, and renders the resulting DTO.  Routes are plain ``def`` so
FastAPI runs them in its thread pool alongside the blocking database
driver.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response

from storefront.application.add_product import AddProductHandler
from storefront.application.advance_order_status import AdvanceOrderStatusHandler
from storefront.application.cart import (
    AddToCartHandler,
    ClearCartHandler,
    RemoveCartItemHandler,
    ShowCartHandler,
    UpdateCartItemHandler,
)
from storefront.application.categories import (
    AddCategoryHandler,
    ListCategoriesHandler,
    ShowCategoryHandler,
)
from storefront.application.checkout import PreviewCheckoutHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.delete_product import DeleteProductHandler
from storefront.application.list_orders import ListAllOrdersHandler, ListOrdersHandler
from storefront.application.list_products import ListProductsHandler
from storefront.application.reviews import (
    DeleteReviewHandler,
    ListReviewsHandler,
    MarkReviewHelpfulHandler,
    SubmitReviewHandler,
    UpdateReviewHandler,
)
from storefront.application.show_order import ShowOrderHandler
from storefront.application.show_product import ShowProductHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import ForbiddenError
from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.http.schemas import (
    CartItemBody,
    CartQuantityBody,
    CategoryBody,
    CreateOrderBody,
    OrderStatusBody,
    ProductBody,
    ProductPatchBody,
    ReviewBody,
    to_wire,
)

router = APIRouter()


def get_container(request: Request) -> Container:
    return request.app.state.container


def current_user(
    user_id: Annotated[str | None, Header(alias="X-User-Id")] = None,
) -> str:
    if not user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user_id


def is_admin(
    role: Annotated[str | None, Header(alias="X-User-Role")] = None,
) -> bool:
    return (role or "").lower() == "admin"


def require_admin(admin: Annotated[bool, Depends(is_admin)]) -> None:
    if not admin:
        raise ForbiddenError("Admin access required")


ContainerDep = Annotated[Container, Depends(get_container)]
UserDep = Annotated[str, Depends(current_user)]
PageParam = Annotated[int, Query(ge=1)]
LimitParam = Annotated[int, Query(ge=1, le=100)]


# --- Catalog ------------------------------------------------------------------


@router.get("/products")
def list_products(
    container: ContainerDep,
    category_id: Annotated[str | None, Query(alias="categoryId")] = None,
    min_price: Annotated[str | None, Query(alias="minPrice")] = None,
    max_price: Annotated[str | None, Query(alias="maxPrice")] = None,
    in_stock: Annotated[bool, Query(alias="inStock")] = False,
    sustainable: bool = False,
    featured: bool | None = None,
    is_new: Annotated[bool | None, Query(alias="isNew")] = None,
    on_sale: Annotated[bool | None, Query(alias="onSale")] = None,
    search: str | None = None,
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    sort_order: Annotated[str | None, Query(alias="sortOrder")] = None,
    page: PageParam = 1,
    limit: LimitParam = 20,
):
    handler = ListProductsHandler(
        container.uow(), container.settings.sustainability_threshold
    )
    result = handler.handle(
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        in_stock=in_stock,
        sustainable=sustainable,
        featured=featured,
        is_new=is_new,
        on_sale=on_sale,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return to_wire(result)


@router.get("/products/{product_id}")
def show_product(product_id: str, container: ContainerDep):
    return to_wire(ShowProductHandler(container.uow()).handle(product_id))


@router.post("/products", status_code=201, dependencies=[Depends(require_admin)])
def add_product(body: ProductBody, container: ContainerDep):
    dto = AddProductHandler(container.uow()).handle(
        name=body.name,
        price=str(body.price),
        stock=body.stock,
        category_id=body.category_id,
        description=body.description,
        discount=body.discount,
        on_sale=body.on_sale,
        is_new=body.is_new,
        featured=body.featured,
        images=body.images,
        sustainability_score=body.sustainability_score,
    )
    return to_wire(dto)


@router.patch("/products/{product_id}", dependencies=[Depends(require_admin)])
def update_product(product_id: str, body: ProductPatchBody, container: ContainerDep):
    given = body.model_fields_set
    changes = {
        "name": body.name,
        "price": str(body.price) if body.price is not None else None,
        "stock": body.stock,
        "category_id": body.category_id,
        "description": body.description,
        "on_sale": body.on_sale,
        "is_new": body.is_new,
        "featured": body.featured,
    }
    # Explicit nulls clear these two; omitted fields leave them alone.
    if "discount" in given:
        changes["discount"] = body.discount
    if "sustainability_score" in given:
        changes["sustainability_score"] = body.sustainability_score
    return to_wire(UpdateProductHandler(container.uow()).handle(product_id, **changes))


@router.delete("/products/{product_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_product(product_id: str, container: ContainerDep):
    DeleteProductHandler(container.uow()).handle(product_id)
    return Response(status_code=204)


@router.get("/categories")
def list_categories(container: ContainerDep, featured: bool = False):
    categories = ListCategoriesHandler(container.uow()).handle(featured_only=featured)
    return {"categories": to_wire(categories)}


@router.get("/categories/{slug}")
def show_category(slug: str, container: ContainerDep):
    return to_wire(ShowCategoryHandler(container.uow()).handle(slug))


@router.post("/categories", status_code=201, dependencies=[Depends(require_admin)])
def add_category(body: CategoryBody, container: ContainerDep):
    dto = AddCategoryHandler(container.uow()).handle(
        name=body.name,
        slug=body.slug,
        description=body.description,
        image=body.image,
        featured=body.featured,
    )
    return to_wire(dto)


# --- Cart ---------------------------------------------------------------------


@router.get("/cart")
def show_cart(user_id: UserDep, container: ContainerDep):
    return to_wire(ShowCartHandler(container.uow()).handle(user_id))


@router.post("/cart")
def add_to_cart(body: CartItemBody, user_id: UserDep, container: ContainerDep):
    dto = AddToCartHandler(container.uow()).handle(user_id, body.product_id, body.quantity)
    return to_wire(dto)


@router.get("/cart/preview")
def preview_checkout(user_id: UserDep, container: ContainerDep):
    handler = PreviewCheckoutHandler(container.uow(), container.pricing_engine())
    return to_wire(handler.handle(user_id))


@router.patch("/cart/{product_id}")
def update_cart_item(
    product_id: str, body: CartQuantityBody, user_id: UserDep, container: ContainerDep
):
    dto = UpdateCartItemHandler(container.uow()).handle(user_id, product_id, body.quantity)
    return to_wire(dto)


@router.delete("/cart/{product_id}")
def remove_cart_item(product_id: str, user_id: UserDep, container: ContainerDep):
    return to_wire(RemoveCartItemHandler(container.uow()).handle(user_id, product_id))


@router.delete("/cart")
def clear_cart(user_id: UserDep, container: ContainerDep):
    return to_wire(ClearCartHandler(container.uow()).handle(user_id))


# --- Orders -------------------------------------------------------------------


@router.post("/orders", status_code=201)
def create_order(body: CreateOrderBody, user_id: UserDep, container: ContainerDep):
    handler = CreateOrderHandler(container.uow(), container.pricing_engine())
    dto = handler.handle(
        user_id=user_id,
        shipping_address=body.shipping_address.to_domain(),
        payment_method=body.payment_method,
    )
    return to_wire(dto)


@router.get("/orders")
def list_orders(
    user_id: UserDep, container: ContainerDep, page: PageParam = 1, limit: LimitParam = 10
):
    return to_wire(ListOrdersHandler(container.uow()).handle(user_id, page, limit))


@router.get("/orders/{order_id}")
def show_order(
    order_id: int,
    user_id: UserDep,
    admin: Annotated[bool, Depends(is_admin)],
    container: ContainerDep,
):
    dto = ShowOrderHandler(container.uow()).handle(order_id, user_id, privileged=admin)
    return to_wire(dto)


@router.patch("/orders/{order_id}", dependencies=[Depends(require_admin)])
def advance_order(order_id: int, body: OrderStatusBody, container: ContainerDep):
    dto = AdvanceOrderStatusHandler(container.uow()).handle(order_id, body.status)
    return to_wire(dto)


@router.get("/admin/orders", dependencies=[Depends(require_admin)])
def list_all_orders(
    container: ContainerDep,
    status: str | None = None,
    page: PageParam = 1,
    limit: LimitParam = 10,
):
    result = ListAllOrdersHandler(container.uow()).handle(status=status, page=page, limit=limit)
    return to_wire(result)


# --- Reviews ------------------------------------------------------------------


@router.get("/products/{product_id}/reviews")
def list_reviews(
    product_id: str, container: ContainerDep, page: PageParam = 1, limit: LimitParam = 10
):
    return to_wire(ListReviewsHandler(container.uow()).handle(product_id, page, limit))


@router.post("/products/{product_id}/reviews", status_code=201)
def submit_review(
    product_id: str, body: ReviewBody, user_id: UserDep, container: ContainerDep
):
    dto = SubmitReviewHandler(container.uow()).handle(
        product_id, user_id, body.rating, body.title, body.comment
    )
    return to_wire(dto)


@router.put("/products/{product_id}/reviews")
def update_review(
    product_id: str, body: ReviewBody, user_id: UserDep, container: ContainerDep
):
    dto = UpdateReviewHandler(container.uow()).handle(
        product_id, user_id, body.rating, body.title, body.comment
    )
    return to_wire(dto)


@router.delete("/products/{product_id}/reviews", status_code=204)
def delete_review(product_id: str, user_id: UserDep, container: ContainerDep):
    DeleteReviewHandler(container.uow()).handle(product_id, user_id)
    return Response(status_code=204)


@router.post("/reviews/{review_id}/helpful")
def mark_review_helpful(review_id: int, container: ContainerDep):
    return to_wire(MarkReviewHelpfulHandler(container.uow()).handle(review_id))
