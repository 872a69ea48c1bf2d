from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.core.config import settings
from storefront.core.logging import configure_logging, get_logger
from storefront.core.security import TokenConfig, TokenService
from storefront.core.auth_gate import AuthenticationGate
from storefront.core.exceptions import register_exception_handlers
from storefront.db.session import create_db_and_tables
from storefront.routers import auth, cart, health, products

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info(f"{settings.PROJECT_NAME} started")
    yield
    logger.info(f"{settings.PROJECT_NAME} shutting down")

def create_app(token_service: Optional[TokenService] = None) -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    # Fails here, at startup, if the signing key is missing or too short
    token_service = token_service or TokenService(TokenConfig.from_settings(settings))

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        lifespan=lifespan,
        description="Storefront API: accounts, product catalog and shopping cart"
    )
    app.state.token_service = token_service

    @app.get("/")
    def read_root():
        return {"message": f"Welcome to {settings.PROJECT_NAME}. Visit /docs for Swagger UI."}

    app.include_router(health.router, tags=["health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(products.router, prefix="/api/products", tags=["products"])
    app.include_router(cart.router, prefix="/api/cart", tags=["cart"])

    register_exception_handlers(app)

    app.add_middleware(
        AuthenticationGate,
        token_service=token_service,
        allow_anonymous_catalog_read=settings.ALLOW_ANONYMOUS_CATALOG_READ,
    )
    # Added last so it wraps the gate and 401s still carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app

app = create_app()
