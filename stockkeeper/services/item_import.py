import logging
from pathlib import Path
from typing import Optional

from openpyxl import load_workbook

from stockkeeper.exceptions import ValidationError
from stockkeeper.services.item_service import clean_item_fields, create_item, update_item
from stockkeeper.services.parsing import clean_text, is_blank
from stockkeeper.store.base import InventoryStore

logger = logging.getLogger(__name__)

_ALIAS_SPECS = (
    (("product", "code"), "product_code"),
    (("item", "code"), "product_code"),
    (("sku",), "product_code"),
    (("code",), "product_code"),
    (("item", "name"), "name"),
    (("product", "name"), "name"),
    (("name",), "name"),
    (("description",), "description"),
    (("category",), "category"),
    (("category", "name"), "category"),
    (("current", "stock"), "current_stock"),
    (("stock",), "current_stock"),
    (("qty",), "current_stock"),
    (("quantity",), "current_stock"),
    (("min", "qty"), "min_quantity"),
    (("min", "quantity"), "min_quantity"),
    (("minimum", "quantity"), "min_quantity"),
    (("reorder", "level"), "min_quantity"),
    (("price",), "price"),
    (("unit", "price"), "price"),
    (("selling", "price"), "price"),
    (("cost",), "cost_price"),
    (("cost", "price"), "cost_price"),
    (("unit", "cost"), "cost_price"),
    (("supplier",), "supplier"),
    (("supplier", "name"), "supplier"),
    (("location",), "location"),
    (("storage", "location"), "location"),
)

HEADER_ALIASES = {"".join(parts): target for parts, target in _ALIAS_SPECS}
REQUIRED_COLUMNS = {"product_code", "name"}
KNOWN_COLUMNS = {target for _, target in _ALIAS_SPECS}

# Stock on existing items only moves through stock movements.
_IMPORT_ONLY_ON_CREATE = ("current_stock",)


def normalize_header(value):
    if value is None:
        return ""
    value_text = str(value).strip().lower()
    if not value_text:
        return ""
    for char in (" ", "-", ".", "/"):
        value_text = value_text.replace(char, "_")
    value_text = "_".join(part for part in value_text.split("_") if part)
    alias = HEADER_ALIASES.get(value_text)
    if alias:
        return alias
    alias = HEADER_ALIASES.get(value_text.replace("_", ""))
    if alias:
        return alias
    return value_text


def load_sheet_rows(worksheet):
    rows_iter = worksheet.iter_rows(values_only=True)
    headers = next(rows_iter, None)
    if not headers:
        return [], set()
    header_keys = [normalize_header(header) for header in headers]
    indices = [(idx, key) for idx, key in enumerate(header_keys) if key in KNOWN_COLUMNS]
    columns = {key for _, key in indices}

    rows = []
    for row_number, row in enumerate(rows_iter, start=2):
        if row is None or all(is_blank(value) for value in row):
            continue
        record = {key: row[idx] for idx, key in indices if idx < len(row)}
        record["_row"] = row_number
        rows.append(record)
    return rows, columns


def validate_columns(columns):
    missing = sorted(REQUIRED_COLUMNS - columns)
    if missing:
        raise ValidationError(
            "Item sheet missing columns: {}".format(", ".join(missing)),
            details={"missing": missing},
        )


def _row_values(row):
    values = {}
    for key, value in row.items():
        if key == "_row":
            continue
        if key in ("product_code", "name"):
            values[key] = clean_text(value) or ""
        elif is_blank(value):
            continue
        else:
            values[key] = value
    return values


def import_rows(store: InventoryStore, rows, *, dry_run=False):
    counts = {"inserted": 0, "updated": 0, "skipped": 0, "errors": []}
    for row in rows:
        row_number = row.get("_row")
        try:
            fields = clean_item_fields(_row_values(row), partial=False)
        except ValidationError as exc:
            counts["skipped"] += 1
            counts["errors"].append({"row": row_number, "message": exc.message})
            continue

        existing = store.find_item_by_code(fields["product_code"])
        if existing is None:
            if not dry_run:
                create_item(store, fields)
            counts["inserted"] += 1
            continue

        for key in _IMPORT_ONLY_ON_CREATE:
            fields.pop(key, None)
        if not dry_run:
            update_item(store, existing.id, fields)
        counts["updated"] += 1
    return counts


def import_items_workbook(
    workbook_path,
    store: InventoryStore,
    *,
    sheet: Optional[str] = None,
    dry_run: bool = False,
):
    workbook_path = Path(workbook_path)
    if not workbook_path.exists():
        raise FileNotFoundError(f"File not found: {workbook_path}")
    if workbook_path.suffix.lower() != ".xlsx":
        raise ValidationError("Only .xlsx files are supported.")

    workbook = load_workbook(workbook_path, data_only=True, read_only=True)
    try:
        if sheet:
            if sheet not in workbook.sheetnames:
                raise ValidationError(f"Sheet not found: {sheet}", details={"sheet": sheet})
            worksheet = workbook[sheet]
        else:
            worksheet = workbook[workbook.sheetnames[0]]
        rows, columns = load_sheet_rows(worksheet)
    finally:
        workbook.close()

    validate_columns(columns)
    counts = import_rows(store, rows, dry_run=dry_run)
    logger.info(
        "Item import from %s: %s inserted, %s updated, %s skipped%s",
        workbook_path.name,
        counts["inserted"],
        counts["updated"],
        counts["skipped"],
        " (dry run)" if dry_run else "",
    )
    return counts


__all__ = [
    "import_items_workbook",
    "import_rows",
    "load_sheet_rows",
    "normalize_header",
    "validate_columns",
]
