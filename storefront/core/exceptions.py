from datetime import datetime, timezone
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.core.logging import get_logger

logger = get_logger(__name__)


class DomainError(Exception):
    """Base class for errors raised by the service layer."""
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

# --- Not found ---

class ResourceNotFoundError(DomainError):
    """A cart, cart item or product does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"

# --- Client errors ---

class InvalidOperationError(DomainError):
    """Quantity out of range, checkout of an empty cart and similar."""
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"

class UnauthorizedError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"


def error_body(status_code: int, error: str, message: str) -> dict:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status_code,
        "error": error,
        "message": message,
    }

def unauthorized_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=error_body(status.HTTP_401_UNAUTHORIZED, UnauthorizedError.error, message),
        headers={"WWW-Authenticate": "Bearer"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        if isinstance(exc, UnauthorizedError):
            logger.warning(f"Unauthorized: {exc.message}")
            return unauthorized_response(exc.message)
        logger.warning(f"{type(exc).__name__}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.status_code, exc.error, exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        messages = [
            f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
            for err in exc.errors()
        ]
        logger.warning(f"Validation failed: {messages}")
        body = error_body(status.HTTP_400_BAD_REQUEST, "Validation Failed", "Request validation failed")
        body["messages"] = messages
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        # Real cause stays in the server log
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal Server Error",
                "Internal server error",
            ),
        )
