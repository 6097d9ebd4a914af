import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DataError, IntegrityError, OperationalError, SQLAlchemyError

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A store operation failed outside of the ORM driver."""


class UpdateValuesMissingError(StoreError):
    def __init__(self) -> None:
        super().__init__("Cannot perform update query because update values are not defined")


class NotFoundError(Exception):
    """Answered with 404 and ``message`` as a bare JSON string."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# Checked in order, first match wins.
ERROR_KINDS: list[tuple[type[Exception], str, int]] = [
    (IntegrityError, "integrity_error", 500),
    (OperationalError, "operational_error", 500),
    (DataError, "data_error", 500),
    (SQLAlchemyError, "store_error", 500),
    (StoreError, "store_error", 500),
]


def classify(exc: Exception) -> tuple[str, int]:
    for exc_type, kind, status_code in ERROR_KINDS:
        if isinstance(exc, exc_type):
            return kind, status_code
    return "store_error", 500


def error_body(exc: Exception) -> dict:
    kind, _ = classify(exc)
    # DBAPI errors wrap the driver exception; its text is the useful part.
    orig = getattr(exc, "orig", None)
    message = str(orig) if orig is not None else str(exc)
    return {"error": kind, "name": type(exc).__name__, "message": message}


async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    kind, status_code = classify(exc)
    logger.error("%s %s failed: %s (%s)", request.method, request.url.path, type(exc).__name__, kind)
    return JSONResponse(status_code=status_code, content=error_body(exc))


async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=404, content=str(exc))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
