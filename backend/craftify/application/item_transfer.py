"""Item CSV export and import, layered on top of the item store contract."""
from __future__ import annotations
import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from craftify.application.item_store import ItemStore
from craftify.domain.catalog.models import Item
from craftify.domain.common.result import ErrorKind, Result

logger = logging.getLogger(__name__)

EXPORT_HEADER = ["ID", "Code", "Product name", "Status", "Category", "UoM"]
UTF8_BOM = b"\xef\xbb\xbf"

IMPORT_MODES = {"upsert", "create"}

# CSV column → store payload key
_IMPORT_COLUMNS = {
    "code": "code",
    "product name": "name",
    "name": "name",
    "status": "status",
    "category": "category_name",
    "uom": "uom_base",
    "description": "description",
}

# store field name → CSV column reported in row errors
_ERROR_COLUMNS = {
    "code": "Code",
    "name": "Product name",
    "status": "Status",
    "category_name": "Category",
    "uom_base": "UoM",
    "description": "Description",
}


# ------------------------------------------------------------------
# Export
# ------------------------------------------------------------------
def items_to_csv(items: Iterable[Item]) -> bytes:
    """UTF-8 CSV with a byte-order mark; fields with commas, quotes or newlines are quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(EXPORT_HEADER)
    for item in items:
        writer.writerow([
            item.id,
            item.code,
            item.name,
            item.status.value if item.status else "",
            item.category_name or "",
            item.uom_base or "",
        ])
    return UTF8_BOM + buf.getvalue().encode("utf-8")


def parse_ids(raw: Optional[str]) -> Optional[List[str]]:
    """Comma-separated identities; None when nothing usable was supplied."""
    if raw is None:
        return None
    ids = [part.strip() for part in raw.split(",") if part.strip()]
    return ids or None


def export_items(
    store: ItemStore,
    q: Optional[str] = None,
    status: Optional[str] = None,
    uom: Optional[str] = None,
    ids: Optional[List[str]] = None,
) -> bytes:
    rows = store.select(q=q, filters={"status": status, "uom": uom}, identities=ids)
    logger.info("Exporting %d items (q=%s status=%s uom=%s ids=%s)", len(rows), q, status, uom, ids)
    return items_to_csv(rows)


# ------------------------------------------------------------------
# Import
# ------------------------------------------------------------------
@dataclass
class ImportRowError:
    row: int
    field: Optional[str]
    message: str


@dataclass
class ImportReport:
    created: int = 0
    updated: int = 0
    errors: List[ImportRowError] = field(default_factory=list)


def _decode(payload: bytes) -> str:
    if payload.startswith(UTF8_BOM):
        payload = payload[len(UTF8_BOM):]
    return payload.decode("utf-8")


def _row_payload(row: Dict[str, Optional[str]]) -> dict:
    payload: dict = {}
    for column, value in row.items():
        if column is None:
            continue
        key = _IMPORT_COLUMNS.get(column.strip().lower())
        if key is not None and key not in payload:
            payload[key] = value
    return payload


def _record_failure(report: ImportReport, row_number: int, result: Result) -> None:
    if result.field_errors:
        for name, message in result.field_errors.items():
            report.errors.append(ImportRowError(row_number, _ERROR_COLUMNS.get(name, name), message))
        return
    column = "Code" if result.kind is ErrorKind.CONFLICT else None
    report.errors.append(ImportRowError(row_number, column, result.error or "rejected"))


def import_items(store: ItemStore, payload: bytes, mode: str = "upsert") -> Result[ImportReport]:
    """
    Apply every CSV row through the store's normal create/update path.
    A bad row is reported and skipped; it never aborts the batch.
    """
    mode = (mode or "upsert").strip().lower()
    if mode not in IMPORT_MODES:
        return Result.invalid({"mode": f"must be one of {', '.join(sorted(IMPORT_MODES))}"})

    try:
        text = _decode(payload)
    except UnicodeDecodeError:
        return Result.invalid({"file": "must be UTF-8 encoded CSV"})

    reader = csv.DictReader(io.StringIO(text))
    columns = {(name or "").strip().lower() for name in (reader.fieldnames or [])}
    if not columns & {"product name", "name"}:
        return Result.invalid({"file": "missing header row with a 'Product name' column"})

    report = ImportReport()
    for row_number, row in enumerate(reader, start=1):
        result = store.upsert(_row_payload(row), create_only=(mode == "create"))
        if not result.is_success:
            _record_failure(report, row_number, result)
            continue
        _, created = result.value
        if created:
            report.created += 1
        else:
            report.updated += 1

    logger.info(
        "Import (%s) finished: created=%d updated=%d errors=%d",
        mode, report.created, report.updated, len(report.errors),
    )
    return Result.ok(report)
