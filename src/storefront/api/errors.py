"""Exception handlers for checkout outcomes that are not validation errors.

Validation and not-found errors are mapped by Protean's own FastAPI
integration; these cover sold-out races (409) and an exhausted retry
budget (503).
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.shared.exceptions import CheckoutUnavailable, ResourceExhausted

logger = structlog.get_logger(__name__)


async def resource_exhausted_handler(request: Request, exc: ResourceExhausted) -> JSONResponse:
    logger.info("Checkout rejected, resource exhausted", path=request.url.path, code=exc.code, error=exc.message)
    return JSONResponse(status_code=409, content={"error": exc.message, "code": exc.code})


async def checkout_unavailable_handler(request: Request, exc: CheckoutUnavailable) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={"error": str(exc) or "Checkout is temporarily unavailable", "code": "checkout_unavailable"},
        headers={"Retry-After": "1"},
    )


def register_checkout_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ResourceExhausted, resource_exhausted_handler)
    app.add_exception_handler(CheckoutUnavailable, checkout_unavailable_handler)
