import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Optional

from stockkeeper.core.constants import MOVEMENT_OUT, UNCATEGORIZED
from stockkeeper.core.dates import ensure_utc, local_day_bounds, month_start, normalize_date
from stockkeeper.exceptions import ValidationError
from stockkeeper.services.low_stock import coerce_number, derive_low_stock, read_field
from stockkeeper.store.base import InventoryStore

logger = logging.getLogger(__name__)


@dataclass
class SalesSummary:
    start_date: date
    end_date: date
    total_revenue: float = 0.0
    total_items: int = 0
    average_daily: float = 0.0
    daily_sales: dict[str, float] = field(default_factory=dict)


@dataclass
class LowStockEntry:
    item_id: Optional[int]
    product_code: Optional[str]
    name: Optional[str]
    quantity: float
    min_quantity: float


@dataclass
class InventorySummary:
    total_items: int = 0
    total_value: float = 0.0
    low_stock_count: int = 0
    category_breakdown: dict[str, int] = field(default_factory=dict)
    low_stock_items: list[LowStockEntry] = field(default_factory=list)


@dataclass
class DashboardStats:
    total_items: int
    low_stock: int
    total_value: float
    monthly_transactions: int


def _to_datetime(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str) and value.strip():
        try:
            return ensure_utc(datetime.fromisoformat(value.strip()))
        except ValueError:
            return None
    return None


def validate_date_range(start_date, end_date) -> tuple[date, date]:
    start = normalize_date(start_date)
    end = normalize_date(end_date)
    if start is None or end is None:
        raise ValidationError(
            "start_date and end_date must be dates (YYYY-MM-DD)",
            details={"start_date": str(start_date), "end_date": str(end_date)},
        )
    if start > end:
        raise ValidationError(
            "start_date must not be after end_date",
            details={"start_date": start.isoformat(), "end_date": end.isoformat()},
        )
    return start, end


def compute_sales_summary(transactions, start_date, end_date, tz=timezone.utc) -> SalesSummary:
    """Revenue and units sold from stock-out entries inside whole local days.

    Sums go through ``math.fsum`` so the result does not depend on the order
    of ``transactions``.
    """
    start, end = validate_date_range(start_date, end_date)
    lower, upper = local_day_bounds(start, end, tz)

    revenue_by_day = defaultdict(list)
    quantities = []
    for transaction in transactions:
        if str(read_field(transaction, "type") or "").upper() != MOVEMENT_OUT:
            continue
        moment = _to_datetime(read_field(transaction, "date"))
        if moment is None or moment < lower or moment > upper:
            continue
        day_key = moment.astimezone(tz).date().isoformat()
        revenue_by_day[day_key].append(coerce_number(read_field(transaction, "total")))
        quantities.append(int(coerce_number(read_field(transaction, "quantity"))))

    daily_sales = {day: math.fsum(values) for day, values in sorted(revenue_by_day.items())}
    total_revenue = math.fsum(value for values in revenue_by_day.values() for value in values)
    average_daily = total_revenue / len(daily_sales) if daily_sales else 0.0

    return SalesSummary(
        start_date=start,
        end_date=end,
        total_revenue=total_revenue,
        total_items=sum(quantities),
        average_daily=average_daily,
        daily_sales=daily_sales,
    )


def _category_label(value) -> str:
    if value is None:
        return UNCATEGORIZED
    label = str(value).strip()
    return label or UNCATEGORIZED


def compute_inventory_summary(items) -> InventorySummary:
    items = list(items)
    category_breakdown: dict[str, int] = {}
    values = []
    for item in items:
        label = _category_label(read_field(item, "category"))
        category_breakdown[label] = category_breakdown.get(label, 0) + 1
        stock = coerce_number(read_field(item, "current_stock"))
        price = coerce_number(read_field(item, "price"))
        values.append(stock * price)

    low_stock = derive_low_stock(items)
    return InventorySummary(
        total_items=len(items),
        total_value=math.fsum(values),
        low_stock_count=len(low_stock),
        category_breakdown=category_breakdown,
        low_stock_items=[
            LowStockEntry(
                item_id=read_field(item, "id"),
                product_code=read_field(item, "product_code"),
                name=read_field(item, "name"),
                quantity=coerce_number(read_field(item, "current_stock")),
                min_quantity=coerce_number(read_field(item, "min_quantity")),
            )
            for item in low_stock
        ],
    )


class ReportService:
    """Read side: runs store snapshots through the pure report functions."""

    def __init__(self, store: InventoryStore, *, tz=timezone.utc):
        self.store = store
        self.tz = tz

    def today(self) -> date:
        return datetime.now(self.tz).date()

    def sales_summary(self, start_date, end_date) -> SalesSummary:
        start, end = validate_date_range(start_date, end_date)
        bounds = local_day_bounds(start, end, self.tz)
        transactions = self.store.query_transactions(type_filter=MOVEMENT_OUT, date_range=bounds)
        summary = compute_sales_summary(transactions, start, end, self.tz)
        logger.debug(
            "Sales summary %s..%s: %s entries, %s days",
            start,
            end,
            len(transactions),
            len(summary.daily_sales),
        )
        return summary

    def inventory_summary(self) -> InventorySummary:
        return compute_inventory_summary(self.store.query_items())

    def dashboard_stats(self, today: Optional[date] = None) -> DashboardStats:
        today = today or self.today()
        summary = self.inventory_summary()
        since, until = local_day_bounds(month_start(today), today, self.tz)
        monthly = self.store.query_transactions(date_range=(since, until))
        return DashboardStats(
            total_items=summary.total_items,
            low_stock=summary.low_stock_count,
            total_value=summary.total_value,
            monthly_transactions=len(monthly),
        )

    def recent_transactions(self, limit: int, type_filter: Optional[str] = None) -> list:
        return self.store.query_transactions(type_filter=type_filter, limit=limit)

    def activity_page(self, limit: int) -> tuple[list, int]:
        return self.store.query_activity_logs(limit=limit), self.store.count_activity_logs()


__all__ = [
    "DashboardStats",
    "InventorySummary",
    "LowStockEntry",
    "ReportService",
    "SalesSummary",
    "compute_inventory_summary",
    "compute_sales_summary",
    "validate_date_range",
]
