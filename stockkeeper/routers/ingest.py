from fastapi import APIRouter, Depends, HTTPException
from openpyxl.utils.exceptions import InvalidFileException

from stockkeeper.dependencies import get_store, require_auth
from stockkeeper.schemas.item import ItemImportRequest
from stockkeeper.services.item_import import import_items_workbook
from stockkeeper.store import InventoryStore

router = APIRouter(prefix="/ingest", tags=["Ingest"])


@router.post("/items")
def ingest_items(
    payload: ItemImportRequest,
    store: InventoryStore = Depends(get_store),
    _auth=Depends(require_auth),
):
    try:
        result = import_items_workbook(
            payload.path,
            store,
            sheet=payload.sheet,
            dry_run=payload.dry_run,
        )
    except (OSError, InvalidFileException) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"result": result}


__all__ = ["router"]
