"""FastAPI application factory and error translation."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.domain.exceptions import DomainException, StoreUnavailableError
from storefront.infrastructure.bootstrap import Container, build
from storefront.infrastructure.http.routes import router

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "ValidationError": 400,
    "EmptyCart": 400,
    "InsufficientStock": 400,
    "ProductUnavailable": 400,
    "Forbidden": 403,
    "NotFound": 404,
    "InvalidTransition": 409,
    "DuplicateReview": 409,
}

_KIND_BY_HTTP_STATUS = {401: "Unauthorized", 403: "Forbidden", 404: "NotFound", 405: "MethodNotAllowed"}


def error_body(kind: str, message: str) -> dict:
    return {"error": {"kind": kind, "message": message}}


async def _domain_error(request: Request, exc: DomainException) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_KIND.get(exc.kind, 400),
        content=error_body(exc.kind, str(exc)),
    )


async def _store_unavailable(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content=error_body(exc.kind, str(exc)))


async def _request_shape_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(status_code=422, content=error_body("ValidationError", problems))


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    kind = _KIND_BY_HTTP_STATUS.get(exc.status_code, "HTTPError")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(kind, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


def create_app(container: Container | None = None) -> FastAPI:
    container = container or build()
    app = FastAPI(title="Storefront", version="0.1.0")
    app.state.container = container

    app.add_exception_handler(DomainException, _domain_error)
    app.add_exception_handler(StoreUnavailableError, _store_unavailable)
    app.add_exception_handler(RequestValidationError, _request_shape_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.include_router(router)
    return app
