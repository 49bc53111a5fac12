"""
Exception handlers

Every error leaves the API in the same envelope:
{"success": false, "error": {"code", "message", "details"}}.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .exceptions import BaseAPIException, InternalServerError

logger = logging.getLogger("bingoo")


def _describe(request: Request) -> str:
    client = request.client.host if request.client else "-"
    request_id = getattr(request.state, "request_id", "-")
    return f"[{request_id}] {request.method} {request.url.path} from {client}"


def _envelope(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> dict:
    return {
        "success": False,
        "error": {"code": code, "message": message, "details": details or {}},
    }


def _log(request: Request, status_code: int, message: str) -> None:
    if status_code >= 500:
        logger.error(f"{_describe(request)} -> {status_code}: {message}")
    else:
        logger.warning(f"{_describe(request)} -> {status_code}: {message}")


async def handle_base_api_exception(request: Request, exc: BaseAPIException):
    _log(request, exc.status_code, f"{exc.error_code} {exc.message}")
    return JSONResponse(
        status_code=exc.status_code, content=jsonable_encoder(exc.detail)
    )


async def handle_http_exception(request: Request, exc: HTTPException):
    """Framework-raised HTTP errors (404 route, 405 method, ...)."""
    _log(request, exc.status_code, str(exc.detail))
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        content = _envelope("HTTP_ERROR", str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(content),
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    _log(request, 422, f"request validation failed: {exc.errors()}")
    content = _envelope("VALIDATION_001", "Validation failed", {"errors": exc.errors()})
    return JSONResponse(status_code=422, content=jsonable_encoder(content))


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(
        f"{_describe(request)} -> unhandled {type(exc).__name__}: {exc}",
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    internal = InternalServerError()
    return JSONResponse(status_code=internal.status_code, content=internal.detail)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAPIException, handle_base_api_exception)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
