from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Index, Integer, String

from stockkeeper.database.base import Base


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    type = Column(String(3), nullable=False)

    # No foreign key: ledger rows keep their item snapshot even if the item goes.
    item_id = Column(Integer, nullable=False)
    item_name = Column(String, nullable=False)
    item_code = Column(String, nullable=False)

    quantity = Column(Integer, nullable=False)
    unit_value = Column(Float, nullable=False)
    total = Column(Float, nullable=False)

    previous_stock = Column(Integer, nullable=False)
    new_stock = Column(Integer, nullable=False)

    supplier = Column(String, nullable=False, default="")
    reference_number = Column(String, nullable=False, default="")
    notes = Column(String, nullable=False, default="")

    date = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    created_by = Column(String)

    __table_args__ = (
        Index("idx_transactions_type_date", "type", "date"),
        Index("idx_transactions_item", "item_id"),
    )


__all__ = ["Transaction"]
