import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from stockkeeper.config import get_settings
from stockkeeper.dependencies import get_store
from stockkeeper.exceptions import StoreUnavailableError
from stockkeeper.store import InventoryStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(store: InventoryStore = Depends(get_store)):
    """Liveness plus a database round-trip. 503 while the store is unreachable."""
    settings = get_settings()
    try:
        store.ping()
        database = "ok"
    except StoreUnavailableError as exc:
        logger.warning("Health check: inventory store unreachable (%s)", exc.message)
        database = "unavailable"

    healthy = database == "ok"
    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "ok" if healthy else "degraded",
            "app": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
            "database": database,
            "atomic_movements": settings.ATOMIC_MOVEMENTS,
            "time": datetime.now(timezone.utc).isoformat(),
        },
    )


__all__ = ["router"]
