from stockkeeper.routers.activity import router as activity_router
from stockkeeper.routers.health import router as health_router
from stockkeeper.routers.ingest import router as ingest_router
from stockkeeper.routers.items import router as items_router
from stockkeeper.routers.reports import router as reports_router
from stockkeeper.routers.stock import router as stock_router

__all__ = [
    "activity_router",
    "health_router",
    "ingest_router",
    "items_router",
    "reports_router",
    "stock_router",
]
