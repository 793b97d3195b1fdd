from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SalesSummaryRead(BaseModel):
    start_date: date
    end_date: date
    total_revenue: float
    total_items: int
    average_daily: float
    daily_sales: dict[str, float]

    model_config = ConfigDict(from_attributes=True)


class LowStockEntryRead(BaseModel):
    item_id: Optional[int] = None
    product_code: Optional[str] = None
    name: Optional[str] = None
    quantity: float
    min_quantity: float

    model_config = ConfigDict(from_attributes=True)


class InventorySummaryRead(BaseModel):
    total_items: int
    total_value: float
    low_stock_count: int
    category_breakdown: dict[str, int]
    low_stock_items: list[LowStockEntryRead]

    model_config = ConfigDict(from_attributes=True)


class DashboardStatsRead(BaseModel):
    total_items: int
    low_stock: int
    total_value: float
    monthly_transactions: int

    model_config = ConfigDict(from_attributes=True)
