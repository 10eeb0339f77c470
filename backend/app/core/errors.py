from typing import Any, Dict, List, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import IntegrityError

from app.core.config import settings

log = logger.bind(component="errors")


class BugTrackerError(Exception):
    """Base class for domain errors that map onto an HTTP status."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, errors: Sequence[str] = ()):
        super().__init__(message)
        self.message = message
        self.errors = list(errors)


class InvalidFilterError(BugTrackerError):
    """Raised when a list filter carries a value outside its enum."""


class InvalidBugTypeError(BugTrackerError):
    """Raised when a bug type is not allowed for the referenced project."""

    def __init__(self, allowed: Sequence[str]):
        self.allowed = list(allowed)
        super().__init__(f"Invalid bug type. Available types: {', '.join(self.allowed)}")


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> List[str]:
    """
    Flatten pydantic error dicts into "<field>: <message>" strings.
    """
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        messages.append(f"{field}: {error.get('msg', 'Invalid value')}")
    return messages


def classify_integrity_error(exc: IntegrityError) -> str:
    text = str(getattr(exc, "orig", exc)).lower()
    if "unique" in text or "duplicate" in text:
        return "Duplicate field value entered"
    return "Database constraint violated"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = format_validation_errors(exc.errors())
    log.info(f"Validation failed for {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": errors},
    )


async def domain_exception_handler(request: Request, exc: BugTrackerError) -> JSONResponse:
    content: Dict[str, Any] = {"detail": exc.message}
    if exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    message = classify_integrity_error(exc)
    log.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.opt(exception=exc).error(
        f"Unhandled error on {request.method} {request.url.path}: {str(exc)}"
    )
    content: Dict[str, Any] = {"detail": "Internal Server Error"}
    if not settings.is_production:
        content["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(BugTrackerError, domain_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
