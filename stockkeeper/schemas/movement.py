from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class MovementRequest(BaseModel):
    item_id: int = Field(validation_alias=AliasChoices("item_id", "itemId"))
    direction: str = Field(validation_alias=AliasChoices("direction", "type"))
    # Left loose so the engine, not pydantic, decides what a valid quantity is.
    quantity: Any
    unit_cost: Optional[float] = Field(None, validation_alias=AliasChoices("unit_cost", "unitCost"))
    supplier: str = ""
    reference_number: str = Field("", validation_alias=AliasChoices("reference_number", "referenceNumber"))
    notes: str = ""

    model_config = ConfigDict(populate_by_name=True)


class TransactionRead(BaseModel):
    id: int
    type: str
    item_id: int
    item_name: str
    item_code: str
    quantity: int
    unit_value: float
    total: float
    previous_stock: int
    new_stock: int
    supplier: str
    reference_number: str
    notes: str
    date: datetime
    created_by: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ActivityLogRead(BaseModel):
    id: int
    action: str
    details: str
    timestamp: datetime
    user_id: Optional[str] = None
    item_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class ActivityPage(BaseModel):
    total: int
    results: list[ActivityLogRead]
