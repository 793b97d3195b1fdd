import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from openpyxl.utils.exceptions import InvalidFileException

from stockkeeper.config import get_settings
from stockkeeper.core.logging import setup_logging
from stockkeeper.exceptions import StockError
from stockkeeper.services.item_import import import_items_workbook
from stockkeeper.store import SqlInventoryStore


def parse_args():
    parser = argparse.ArgumentParser(
        description="Import inventory items from an Excel workbook."
    )
    parser.add_argument("--path", required=True, help="Path to .xlsx workbook.")
    parser.add_argument("--sheet", default=None, help="Sheet to read. Default: first sheet.")
    parser.add_argument("--dry-run", action="store_true", help="Validate without saving.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    store = SqlInventoryStore.from_url(get_settings().DATABASE_URL)
    try:
        counts = import_items_workbook(args.path, store, sheet=args.sheet, dry_run=args.dry_run)
    except (OSError, StockError, InvalidFileException) as exc:
        raise SystemExit(f"Import failed: {exc}") from exc

    print(
        f"items: {counts['inserted']} inserted, "
        f"{counts['updated']} updated, {counts['skipped']} skipped"
    )
    for error in counts["errors"]:
        print(f"  row {error['row']}: {error['message']}")

    if args.dry_run:
        print("Dry run complete, no changes committed.")
    else:
        print("Import complete.")


if __name__ == "__main__":
    main()
