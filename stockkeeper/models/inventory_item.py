from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Float, Index, Integer, String

from stockkeeper.database.base import Base


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True)

    product_code = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    category = Column(String)

    current_stock = Column(Integer, nullable=False, default=0)
    min_quantity = Column(Integer, nullable=False, default=0)

    price = Column(Float, nullable=False, default=0)
    cost_price = Column(Float, nullable=False, default=0)

    supplier = Column(String, nullable=False, default="")
    location = Column(String, nullable=False, default="")

    last_updated = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="ck_inventory_items_stock_non_negative"),
        Index("idx_inventory_items_category", "category"),
    )


__all__ = ["InventoryItem"]
