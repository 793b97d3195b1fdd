from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from stockkeeper.config import Settings, get_settings
from stockkeeper.core.logging import setup_logging
from stockkeeper.database import Base, engine
from stockkeeper.exceptions import (
    InsufficientStockError,
    ItemInUseError,
    NotFoundError,
    StockConflictError,
    StockError,
    StoreUnavailableError,
    ValidationError,
)
from stockkeeper.models import import_all_models
from stockkeeper.routers import (
    activity_router,
    health_router,
    ingest_router,
    items_router,
    reports_router,
    stock_router,
)

ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    InsufficientStockError: 409,
    StockConflictError: 409,
    ItemInUseError: 409,
    StoreUnavailableError: 503,
}

setup_logging()
settings: Settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    import_all_models()
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)


@app.exception_handler(StockError)
async def stock_error_handler(_request: Request, exc: StockError):
    status_code = ERROR_STATUS.get(type(exc), 500)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


app.include_router(health_router)
app.include_router(items_router)
app.include_router(stock_router)
app.include_router(reports_router)
app.include_router(activity_router)
app.include_router(ingest_router)


@app.get("/")
def root():
    return RedirectResponse(url="/docs", status_code=302)


__all__ = ["app", "root"]
