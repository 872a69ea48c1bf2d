"""
Request authentication gate.

Runs once per request before routing. A valid ``Authorization: Bearer``
token binds an :class:`Identity` to ``request.state.identity``; anything else
leaves the request unauthenticated. Unauthenticated requests to routes that
are not on the public allow-list are answered with 401 here and never reach
the endpoint.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from storefront.core.security import TokenService, TokenError
from storefront.core.exceptions import unauthorized_response
from storefront.core.logging import get_logger

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "

PUBLIC_PATHS = {"/", "/health", "/docs", "/redoc", "/openapi.json", "/favicon.ico"}
PUBLIC_PREFIXES = ("/api/auth/", "/health/", "/docs/")
CATALOG_PREFIX = "/api/products"


class Identity(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    user_id: int


def is_public(method: str, path: str, allow_anonymous_catalog_read: bool = False) -> bool:
    if method == "OPTIONS":
        # CORS preflight never carries credentials
        return True
    if path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES):
        return True
    if allow_anonymous_catalog_read and method in ("GET", "HEAD"):
        return path == CATALOG_PREFIX or path.startswith(CATALOG_PREFIX + "/")
    return False


def resolve_identity(token_service: TokenService, authorization: Optional[str]) -> Optional[Identity]:
    """Turn an Authorization header into an Identity, or None if it does not check out."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None

    token = authorization[len(BEARER_PREFIX):].strip()
    try:
        username = token_service.extract_username(token)
    except TokenError as e:
        logger.warning(f"Could not parse token: {e}")
        return None

    if not token_service.validate(token, username):
        logger.warning(f"Token rejected for username={username}")
        return None

    try:
        user_id = token_service.extract_user_id(token)
    except TokenError as e:
        logger.warning(f"Token for username={username} has no usable user id: {e}")
        return None

    return Identity(username=username, user_id=user_id)


class AuthenticationGate(BaseHTTPMiddleware):
    def __init__(self, app, token_service: TokenService, allow_anonymous_catalog_read: bool = False):
        super().__init__(app)
        self.token_service = token_service
        self.allow_anonymous_catalog_read = allow_anonymous_catalog_read

    async def dispatch(self, request: Request, call_next):
        identity = getattr(request.state, "identity", None)
        if identity is None:
            identity = resolve_identity(self.token_service, request.headers.get("Authorization"))
            request.state.identity = identity

        if identity is None and not is_public(
            request.method, request.url.path, self.allow_anonymous_catalog_read
        ):
            logger.warning(f"Unauthenticated request rejected: {request.method} {request.url.path}")
            return unauthorized_response("Authentication required, please log in")

        return await call_next(request)
