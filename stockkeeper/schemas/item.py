from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ItemBase(BaseModel):
    product_code: str = Field(validation_alias=AliasChoices("product_code", "productCode"))
    name: str
    description: str = ""
    category: Optional[str] = None
    min_quantity: int = Field(0, validation_alias=AliasChoices("min_quantity", "minQuantity"))
    price: float = 0.0
    cost_price: float = Field(0.0, validation_alias=AliasChoices("cost_price", "costPrice"))
    supplier: str = ""
    location: str = ""

    model_config = ConfigDict(populate_by_name=True)


class ItemCreate(ItemBase):
    current_stock: int = Field(0, validation_alias=AliasChoices("current_stock", "currentStock"))


class ItemUpdate(BaseModel):
    product_code: Optional[str] = Field(None, validation_alias=AliasChoices("product_code", "productCode"))
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    current_stock: Optional[int] = Field(None, validation_alias=AliasChoices("current_stock", "currentStock"))
    min_quantity: Optional[int] = Field(None, validation_alias=AliasChoices("min_quantity", "minQuantity"))
    price: Optional[float] = None
    cost_price: Optional[float] = Field(None, validation_alias=AliasChoices("cost_price", "costPrice"))
    supplier: Optional[str] = None
    location: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class ItemRead(ItemBase):
    id: int
    current_stock: int
    last_updated: datetime
    created_at: datetime
    low_stock: bool = False

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ItemImportRequest(BaseModel):
    path: str
    sheet: Optional[str] = None
    dry_run: bool = False
