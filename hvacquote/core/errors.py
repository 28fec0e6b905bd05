# hvacquote/core/errors.py
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from hvacquote.core.logging_config import logger
from hvacquote.repositories.promo_codes import (
    DuplicatePromoCodeError,
    PromoCodeNotFoundError,
    RebateCapExceededError,
)


def _message(detail) -> str:
    if isinstance(detail, dict) and "message" in detail:
        return str(detail["message"])
    return str(detail)


def register_exception_handlers(app: FastAPI) -> None:
    """Every error leaves the API as {"message": ...}."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": _message(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(
            "request_invalid",
            endpoint=str(request.url.path),
            errors=len(exc.errors()),
        )
        return JSONResponse(status_code=400, content={"message": "Invalid request data"})

    @app.exception_handler(RebateCapExceededError)
    async def rebate_cap_handler(request: Request, exc: RebateCapExceededError):
        return JSONResponse(status_code=400, content={"message": str(exc)})

    @app.exception_handler(DuplicatePromoCodeError)
    async def duplicate_handler(request: Request, exc: DuplicatePromoCodeError):
        return JSONResponse(status_code=409, content={"message": str(exc)})

    @app.exception_handler(PromoCodeNotFoundError)
    async def not_found_handler(request: Request, exc: PromoCodeNotFoundError):
        return JSONResponse(status_code=404, content={"message": str(exc)})

    @app.exception_handler(RateLimitExceeded)
    def ratelimit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning("rate_limited", endpoint=str(request.url.path), limit=str(exc.detail))
        return JSONResponse(
            status_code=429, content={"message": f"Rate limit exceeded: {exc.detail}"}
        )
