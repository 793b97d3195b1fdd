from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from stockkeeper.config import get_settings
from stockkeeper.core.dates import resolve_timezone
from stockkeeper.core.security import authenticate_request, principal_id
from stockkeeper.database.session import SessionLocal
from stockkeeper.services.report_service import ReportService
from stockkeeper.services.stock_service import StockMovementEngine
from stockkeeper.store import InventoryStore, SqlInventoryStore


@lru_cache
def get_store() -> InventoryStore:
    """Process-wide store; subscriptions live on this instance."""
    return SqlInventoryStore(SessionLocal)


def get_movement_engine(store: InventoryStore = Depends(get_store)) -> StockMovementEngine:
    return StockMovementEngine(store, atomic=get_settings().ATOMIC_MOVEMENTS)


def get_report_service(store: InventoryStore = Depends(get_store)) -> ReportService:
    return ReportService(store, tz=resolve_timezone(get_settings().REPORT_TZ))


def require_auth(
    api_key: Optional[str] = Header(None, alias="X-API-Key"),
    api_key_alt: Optional[str] = Header(None, alias="api-key"),
    authorization: Optional[str] = Header(None),
):
    api_key_value = api_key or api_key_alt
    return authenticate_request(
        api_key=api_key_value,
        authorization=authorization,
        require_auth=True,
    )


def current_user_id(principal=Depends(require_auth)) -> Optional[str]:
    return principal_id(principal)


__all__ = [
    "current_user_id",
    "get_movement_engine",
    "get_report_service",
    "get_store",
    "require_auth",
]
