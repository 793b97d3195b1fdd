from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from stockkeeper.dependencies import current_user_id, get_store
from stockkeeper.schemas.item import ItemCreate, ItemRead, ItemUpdate
from stockkeeper.services.item_service import (
    create_item,
    delete_item,
    search_items,
    update_item,
)
from stockkeeper.services.low_stock import derive_low_stock, is_low_stock
from stockkeeper.store import InventoryStore

router = APIRouter(prefix="/items", tags=["Items"])


def _to_read(item) -> ItemRead:
    return ItemRead.model_validate(item).model_copy(update={"low_stock": is_low_stock(item)})


@router.get("", response_model=list[ItemRead])
def list_items(q: Optional[str] = None, store: InventoryStore = Depends(get_store)):
    return [_to_read(item) for item in search_items(store.query_items(), q)]


@router.post("", response_model=ItemRead, status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    payload: ItemCreate,
    store: InventoryStore = Depends(get_store),
    user_id: Optional[str] = Depends(current_user_id),
):
    item = create_item(store, payload.model_dump(), user_id=user_id)
    return _to_read(item)


@router.get("/low-stock", response_model=list[ItemRead])
def list_low_stock(store: InventoryStore = Depends(get_store)):
    return [_to_read(item) for item in derive_low_stock(store.query_items())]


@router.get("/{item_id}", response_model=ItemRead)
def get_inventory_item(item_id: int, store: InventoryStore = Depends(get_store)):
    return _to_read(store.get_item(item_id))


@router.patch("/{item_id}", response_model=ItemRead)
def update_inventory_item(
    item_id: int,
    payload: ItemUpdate,
    store: InventoryStore = Depends(get_store),
    user_id: Optional[str] = Depends(current_user_id),
):
    item = update_item(store, item_id, payload.model_dump(exclude_unset=True), user_id=user_id)
    return _to_read(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inventory_item(
    item_id: int,
    store: InventoryStore = Depends(get_store),
    _user_id: Optional[str] = Depends(current_user_id),
):
    delete_item(store, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
