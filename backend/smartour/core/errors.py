"""
Error taxonomy for report endpoints.

Every error carries an HTTP status and is rendered by the handlers in
smartour.main as {"error": ..., "message": ...}.
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


class ReportingError(Exception):
    """Base class for errors surfaced to dashboard clients."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str, error: str = None):
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message}


class ValidationError(ReportingError):
    """Bad or missing request parameter."""

    status_code = 400
    error = "Invalid request"


class NotFoundError(ReportingError):
    """Referenced entity does not exist."""

    status_code = 404
    error = "Not found"


class DataAccessError(ReportingError):
    """Underlying query failed."""

    status_code = 500
    error = "Failed to fetch data"


async def reporting_error_handler(request: Request, exc: ReportingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.error} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.status_code} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and query strings are client errors (400), not 422."""
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return JSONResponse(
        status_code=400,
        content={"error": ValidationError.error, "message": "; ".join(problems)},
    )
