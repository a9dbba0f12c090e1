"""
Exception handlers that map errors onto the standard error envelope.

Example:
    from common.utils.handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from common.database.errors import StorageError
from common.utils.exceptions import APIException
from common.utils.responses import error_response

logger = logging.getLogger(__name__)


async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
    """Render an APIException with its own status code."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.message, code=exc.code, details=exc.details),
        headers=exc.headers,
    )


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Storage failures that escaped a service boundary."""
    logger.error(f"Unhandled storage error on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=500,
        content=error_response(exc.message, code="STORAGE_ERROR"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=error_response(str(exc), code="INTERNAL_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error envelope handlers to the application."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
