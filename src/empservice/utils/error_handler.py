# src/empservice/utils/error_handler.py
from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# ----------------------------------------
# Error taxonomy
# ----------------------------------------
class ApiError(Exception):
    """An error that maps to one HTTP status and one ``{"error": ...}`` body."""

    status_code = 500
    default_message = "internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class FieldsEmpty(ApiError):
    status_code = 400
    default_message = "Fields are empty"


class NotFound(ApiError):
    status_code = 404
    default_message = "employee not found"


class StoreFailure(ApiError):
    status_code = 500
    default_message = "store operation failed"


# ----------------------------------------
# Helpers
# ----------------------------------------
def _json_error(
    status_code: int,
    message: str,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _log_http(request: Request, status_code: int, detail: str) -> None:
    """
    Log levels:
    - 404 -> INFO
    - other 4xx -> WARNING
    - 5xx -> EXCEPTION (stack trace)
    """
    url = str(request.url)
    method = request.method

    if status_code == 404:
        logger.info("404 Not Found: %s %s | detail=%s", method, url, detail)
        return

    if 400 <= status_code < 500:
        logger.warning("%s: %s %s | detail=%s", status_code, method, url, detail)
        return

    logger.exception("%s: %s %s | detail=%s", status_code, method, url, detail)


# ----------------------------------------
# Handlers
# ----------------------------------------
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    _log_http(request, exc.status_code, exc.message)
    return _json_error(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # routing 404 / 405 and anything raised with HTTPException
    status = int(exc.status_code)
    detail = str(exc.detail)
    _log_http(request, status, detail)
    return _json_error(status, detail, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("500 Unhandled exception: %s %s | %s", request.method, str(request.url), str(exc))
    # this handler runs outside the middleware stack, so the CORS header is set here
    return _json_error(500, "internal server error", headers={"Access-Control-Allow-Origin": "*"})


def setup_error_handling(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
