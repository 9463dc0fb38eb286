import logging
import traceback
from contextlib import contextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from contact_service.shared.errors import (
    INTERNAL_SERVER_ERROR,
    ContactServiceError,
    DecryptionError,
    PersistenceError,
)

__all__ = ["error_envelope", "register_exception_handlers", "server_error_handler"]


@contextmanager
def server_error_handler(logger: logging.Logger, action: str, stacklevel=1):
    """Log storage and decryption failures and surface them as internal errors."""
    # Go 3 levels up to escape @contextmanager methods and current function
    kw = {"stacklevel": 2 + stacklevel}
    try:
        yield

    except DecryptionError as e:
        logger.error("Error %s: %s", action, e.message, **kw)
        raise

    except SQLAlchemyError as e:
        logger.error("Error %s: %s", action, e, **kw)
        raise PersistenceError() from e


def error_envelope(message: str, exc: BaseException | None = None) -> dict:
    content = {"success": False, "message": message}
    if exc is not None:
        content["stack"] = "".join(traceback.format_exception(exc))
    return content


def register_exception_handlers(app: FastAPI, logger: logging.Logger, production: bool):
    """Answer every failure with the ``{success: false, message}`` envelope.

    Server-side failures get an opaque message; the stack is attached only
    outside production.
    """

    def server_error(exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content=error_envelope(INTERNAL_SERVER_ERROR, None if production else exc),
        )

    @app.exception_handler(ContactServiceError)
    async def contact_service_error(request: Request, exc: ContactServiceError):
        if exc.status_code >= 500:
            return server_error(exc)
        return JSONResponse(status_code=exc.status_code, content=error_envelope(exc.message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = errors[0] if errors else {}
        label = ".".join(str(part) for part in detail.get("loc", ())) or "value"
        message = f'"{label}" {detail.get("msg", "is invalid")}'
        logger.warning("Request validation error %s", message)
        return JSONResponse(status_code=422, content=error_envelope(message))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error(
            "Unhandled error on %s: %s", request.url.path, exc, exc_info=exc
        )
        return server_error(exc)
