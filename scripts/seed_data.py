import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from sqlalchemy import delete

from stockkeeper.core.logging import setup_logging
from stockkeeper.database import Base, SessionLocal, engine
from stockkeeper.models import ActivityLog, InventoryItem, Transaction, import_all_models
from stockkeeper.services.item_service import create_item
from stockkeeper.services.stock_service import MovementMetadata, StockMovementEngine
from stockkeeper.store import SqlInventoryStore

SAMPLE_ITEMS = [
    {
        "product_code": "PNT-001",
        "name": "Exterior Paint 5L",
        "category": "Paint",
        "current_stock": 24,
        "min_quantity": 10,
        "price": 45.0,
        "cost_price": 28.0,
        "supplier": "ColorWorks",
        "location": "Aisle 1",
    },
    {
        "product_code": "TLS-014",
        "name": "Claw Hammer",
        "category": "Tools",
        "current_stock": 6,
        "min_quantity": 8,
        "price": 18.5,
        "cost_price": 9.0,
        "supplier": "IronGrip",
        "location": "Aisle 3",
    },
    {
        "product_code": "ELC-210",
        "name": "Extension Cord 10m",
        "category": "Electrical",
        "current_stock": 15,
        "min_quantity": 5,
        "price": 22.0,
        "cost_price": 12.5,
        "supplier": "VoltLine",
        "location": "Aisle 4",
    },
    {
        "product_code": "PLB-032",
        "name": "PVC Elbow 32mm",
        "category": "Plumbing",
        "current_stock": 0,
        "min_quantity": 20,
        "price": 1.2,
        "cost_price": 0.45,
        "supplier": "FlowFit",
        "location": "Bin 12",
    },
]


def parse_args():
    parser = argparse.ArgumentParser(description="Seed sample inventory data.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    import_all_models()
    Base.metadata.create_all(bind=engine)

    if args.reset:
        db = SessionLocal()
        try:
            db.execute(delete(ActivityLog))
            db.execute(delete(Transaction))
            db.execute(delete(InventoryItem))
            db.commit()
        finally:
            db.close()

    store = SqlInventoryStore(SessionLocal)
    if store.query_items():
        print("Seed skipped: items already exist.")
        return

    items = [create_item(store, values, user_id="seed") for values in SAMPLE_ITEMS]
    movements = StockMovementEngine(store)
    seed = MovementMetadata(created_by="seed", reference_number="SEED")
    movements.apply_movement(items[0].id, "OUT", 4, seed)
    movements.apply_movement(items[2].id, "OUT", 3, seed)
    movements.apply_movement(
        items[1].id,
        "IN",
        10,
        MovementMetadata(created_by="seed", reference_number="SEED", supplier="IronGrip"),
    )
    print("Seed data created.")


if __name__ == "__main__":
    main()
