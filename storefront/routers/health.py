import time
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlmodel import Session

from storefront.db.session import get_session
from storefront.core.config import settings
from storefront.core.logging import get_logger
from storefront.services.product import ProductService

logger = get_logger(__name__)

router = APIRouter()

@router.get("/health")
def health():
    """Liveness only, no database access"""
    return {
        "status": "UP",
        "application": settings.PROJECT_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

@router.get("/health/db")
def db_health(session: Session = Depends(get_session)):
    try:
        started = time.perf_counter()
        count = ProductService(session).count_products()
        elapsed_ms = int((time.perf_counter() - started) * 1000)
    except Exception as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "database": "DOWN",
                "error": type(e).__name__,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    logger.info(f"Database health check ok: {elapsed_ms}ms, {count} products")
    return {
        "database": "UP",
        "responseTime": f"{elapsed_ms}ms",
        "productCount": count,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
