import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import OperationalError, SQLAlchemyError, TimeoutError as PoolTimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.core.exceptions import OperationTimeout, PersistenceError
from shared.helpers.json_response_helper import envelope

logger = logging.getLogger(__name__)

# postgres "query_canceled", raised when statement_timeout fires
QUERY_CANCELED_PGCODE = "57014"


def is_timeout(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, PoolTimeoutError):
        return True
    if isinstance(exc, OperationalError):
        return getattr(exc.orig, "pgcode", None) == QUERY_CANCELED_PGCODE
    return False


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        response = envelope(exc.status_code, str(exc.detail))
        for key, value in (exc.headers or {}).items():
            response.headers[key] = value
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(p) for p in err.get("loc", [])), "error": err.get("msg")}
            for err in exc.errors()
        ]
        return envelope(status.HTTP_422_UNPROCESSABLE_ENTITY, "Invalid request body", errors)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        if is_timeout(exc):
            logger.error(f"Database timeout on {request.method} {request.url.path}: {exc}")
            failure = OperationTimeout()
        else:
            logger.exception(f"Database error on {request.method} {request.url.path}")
            failure = PersistenceError()
        return envelope(failure.status_code, failure.message)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
