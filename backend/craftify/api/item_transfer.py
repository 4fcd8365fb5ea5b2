"""Item bulk endpoints — batch delete, CSV export and CSV import."""
from __future__ import annotations
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile
from pydantic import BaseModel

from craftify.api.auth import require_principal
from craftify.api.errors import raise_for_result
from craftify.api.items import normalize_status_filter
from craftify.application.item_store import ItemStore
from craftify.application.item_transfer import export_items, import_items, parse_ids
from craftify.container import get_item_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["items"], dependencies=[Depends(require_principal)])


class BatchDeleteBody(BaseModel):
    ids: Optional[List[Optional[str]]] = None


@router.post("/items:batch-delete")
def batch_delete_items(
    body: BatchDeleteBody,
    store: ItemStore = Depends(get_item_store),
):
    logger.info("POST /items:batch-delete ids=%s", body.ids)
    deleted = store.count_batch_delete(body.ids or [])
    return {"deleted": deleted}


@router.get("/items:export")
def export_items_csv(
    q: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    uom: Optional[str] = Query(None),
    ids: Optional[str] = Query(None),
    store: ItemStore = Depends(get_item_store),
):
    logger.info("GET /items:export q=%s status=%s uom=%s ids=%s", q, status_filter, uom, ids)
    payload = export_items(
        store,
        q=q,
        status=normalize_status_filter(status_filter),
        uom=uom,
        ids=parse_ids(ids),
    )
    filename = f"items_{date.today().isoformat()}.csv"
    return Response(
        content=payload,
        media_type="text/csv; charset=UTF-8",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-store",
        },
    )


@router.post("/items:import")
def import_items_csv(
    file: UploadFile = File(...),
    mode: str = Form("upsert"),
    store: ItemStore = Depends(get_item_store),
):
    payload = file.file.read()
    logger.info("POST /items:import mode=%s fileName=%s size=%d", mode, file.filename, len(payload))
    result = import_items(store, payload, mode)
    raise_for_result(result)
    report = result.value
    return {
        "created": report.created,
        "updated": report.updated,
        "errors": [{"row": e.row, "field": e.field, "message": e.message} for e in report.errors],
    }
