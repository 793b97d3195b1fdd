from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from stockkeeper.config import get_settings
from stockkeeper.dependencies import current_user_id, get_movement_engine, get_report_service
from stockkeeper.schemas.movement import MovementRequest, TransactionRead
from stockkeeper.services.report_service import ReportService
from stockkeeper.services.stock_service import (
    MovementMetadata,
    StockMovementEngine,
    parse_direction,
)

router = APIRouter(prefix="/stock", tags=["Stock"])


@router.post("/movements", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
def create_movement(
    payload: MovementRequest,
    engine: StockMovementEngine = Depends(get_movement_engine),
    user_id: Optional[str] = Depends(current_user_id),
):
    metadata = MovementMetadata(
        reference_number=payload.reference_number,
        notes=payload.notes,
        supplier=payload.supplier,
        unit_cost=payload.unit_cost,
        created_by=user_id,
    )
    return engine.apply_movement(payload.item_id, payload.direction, payload.quantity, metadata)


@router.get("/transactions", response_model=list[TransactionRead])
def list_transactions(
    type: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=1000),
    reports: ReportService = Depends(get_report_service),
):
    type_filter = parse_direction(type) if type else None
    limit = limit or get_settings().RECENT_TRANSACTIONS_LIMIT
    return reports.recent_transactions(limit, type_filter=type_filter)


@router.delete("/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    transaction_id: int,
    engine: StockMovementEngine = Depends(get_movement_engine),
    _user_id: Optional[str] = Depends(current_user_id),
):
    engine.delete_movement(transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
