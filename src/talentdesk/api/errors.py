from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from talentdesk.config import get_settings
from talentdesk.core.errors import ServiceError

logger = logging.getLogger(__name__)


def _stack(exc: BaseException) -> str | None:
    if get_settings().is_production:
        return None
    return "".join(traceback.format_exception(exc))


def error_response(status_code: int, message: str, exc: BaseException) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, "stack": _stack(exc)})


def validation_message(exc: RequestValidationError | ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    message = str(first.get("msg", "Invalid value")).removeprefix("Value error, ")
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path", "form")]
    return f"{'.'.join(location)}: {message}" if location else message


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return error_response(exc.status_code, exc.message, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = str(exc.detail)
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = f"Not Found - {request.url.path}"
        return error_response(exc.status_code, message, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(status.HTTP_400_BAD_REQUEST, validation_message(exc), exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Server Error", exc)
