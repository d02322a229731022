# backend/app/errors.py
"""
Exception handlers shaping every error into the response envelope:
``{success: false, message, code?, errors?}``.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException

logger = logging.getLogger(__name__)

# Location prefixes FastAPI adds in front of the field path
_LOCATION_ROOTS = {"body", "query", "path", "header", "cookie"}


def _envelope(
    message: str,
    *,
    code: Optional[str] = None,
    errors: Optional[List[Dict[str, str]]] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"success": False, "message": message}
    if code:
        payload["code"] = code
    if errors:
        payload["errors"] = errors
    return payload


def _parse_detail(detail: Any) -> tuple[str, Optional[str], Optional[List[Dict[str, str]]]]:
    if isinstance(detail, dict):
        code = detail.get("code") if isinstance(detail.get("code"), str) else None
        message = detail.get("message") or detail.get("detail")
        errors = detail.get("errors") if isinstance(detail.get("errors"), list) else None
        return (message if isinstance(message, str) else "Request failed"), code, errors
    if isinstance(detail, str):
        return detail, None, None
    if detail is None:
        return "Request failed", None, None
    return str(detail), None, None


def _field_errors(raw_errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic errors to ``[{field, message}]`` with camelCase field paths."""
    errors = []
    for error in raw_errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_ROOTS:
            loc = loc[1:]
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        errors.append({"field": ".".join(loc) or "body", "message": message})
    return errors


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        http_exc = exc.to_http_exception()
        message, code, errors = _parse_detail(http_exc.detail)
        return JSONResponse(
            _envelope(message, code=code, errors=errors),
            status_code=http_exc.status_code,
            headers=http_exc.headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message, code, errors = _parse_detail(exc.detail)
        return JSONResponse(
            _envelope(message, code=code, errors=errors),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            _envelope(
                "Validation failed",
                code="VALIDATION_ERROR",
                errors=_field_errors(list(exc.errors())),
            ),
            status_code=400,
        )

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            _envelope(
                "Validation failed",
                code="VALIDATION_ERROR",
                errors=_field_errors(list(exc.errors())),
            ),
            status_code=400,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            _envelope("Internal server error", code="INTERNAL_SERVER_ERROR"),
            status_code=500,
        )
