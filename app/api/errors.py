"""Exception handlers that render every failure as `{error, message}`.

Routes never catch domain errors; they propagate here and are mapped by
the status code carried on the exception class.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.services.errors import IssuanceError

logger = logging.getLogger(__name__)


def _error_body(error: str, message: str) -> dict[str, str]:
    return {"error": error, "message": message}


async def _issuance_error(request: Request, exc: IssuanceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc.message
        )
    return JSONResponse(
        status_code=exc.status_code, content=_error_body(exc.error, exc.message)
    )


async def _request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'][1:]) or 'body'}: {err['msg']}"
        for err in exc.errors()
    )
    logger.warning("Malformed request %s %s: %s", request.method, request.url.path, problems)
    return JSONResponse(
        status_code=400, content=_error_body("Invalid request", problems)
    )


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500, content=_error_body("Internal server error", str(exc))
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IssuanceError, _issuance_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(Exception, _unexpected_error)
