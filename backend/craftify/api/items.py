"""Item CRUD API endpoints."""
from __future__ import annotations
import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field

from craftify.api.auth import require_principal
from craftify.api.errors import raise_for_result
from craftify.application.item_store import ItemStore
from craftify.container import get_item_store
from craftify.core.config import DEFAULT_PAGE_SIZE
from craftify.domain.catalog.models import Item, ItemStatus, ItemUom
from craftify.domain.common.concurrency import record_etag
from craftify.domain.common.query import QueryConfig
from craftify.domain.common.result import Result

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/items", tags=["items"], dependencies=[Depends(require_principal)])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class ItemUomBody(BaseModel):
    uom: Optional[str] = None
    coef: Optional[Decimal] = None
    notes: Optional[str] = None


class ItemBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    category_name: Optional[str] = Field(None, alias="categoryName")
    uom_base: Optional[str] = Field(None, alias="uomBase")
    description: Optional[str] = None
    uoms: List[ItemUomBody] = []


# ------------------------------------------------------------------
# Serializers
# ------------------------------------------------------------------
def _serialize_uom(u: ItemUom) -> dict:
    return {"uom": u.uom, "coef": str(u.coef), "notes": u.notes}


def serialize_item_summary(i: Item) -> dict:
    return {
        "id": i.id,
        "code": i.code,
        "name": i.name,
        "status": i.status.value,
        "categoryId": None,
        "categoryName": i.category_name,
        "uomBase": i.uom_base,
        "updatedAt": i.updated_at.isoformat(),
    }


def serialize_item(i: Item) -> dict:
    return {
        "id": i.id,
        "code": i.code,
        "name": i.name,
        "status": i.status.value,
        "categoryName": i.category_name,
        "uomBase": i.uom_base,
        "description": i.description,
        "uoms": [_serialize_uom(u) for u in i.uoms],
        "createdAt": i.created_at.isoformat(),
        "updatedAt": i.updated_at.isoformat(),
        "version": i.version,
    }


def normalize_status_filter(raw: Optional[str]) -> Optional[str]:
    """Map a status query value onto its canonical spelling; blank means no filter."""
    if raw is None or not raw.strip():
        return None
    parsed = ItemStatus.parse(raw)
    if parsed is None:
        allowed = ", ".join(s.value for s in ItemStatus)
        raise_for_result(Result.invalid({"status": f"must be one of {allowed}"}))
    return parsed.value


# ------------------------------------------------------------------
# Item endpoints
# ------------------------------------------------------------------
@router.get("")
def list_items(
    page: int = Query(0),
    size: int = Query(DEFAULT_PAGE_SIZE),
    sort: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    uom: Optional[str] = Query(None),
    store: ItemStore = Depends(get_item_store),
):
    logger.info("GET /items page=%s size=%s sort=%s q=%s status=%s uom=%s", page, size, sort, q, status_filter, uom)
    config = QueryConfig(
        page=page,
        size=size,
        sort=sort,
        q=q,
        filters={"status": normalize_status_filter(status_filter), "uom": uom},
    )
    result = store.list(config)
    raise_for_result(result)
    p = result.value
    return {
        "content": [serialize_item_summary(i) for i in p.content],
        "page": p.page,
        "size": p.size,
        "totalElements": p.total,
        "totalPages": p.total_pages,
        "sort": p.sort,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_item(
    body: ItemBody,
    response: Response,
    store: ItemStore = Depends(get_item_store),
):
    logger.info("POST /items code=%s name=%s", body.code, body.name)
    result = store.create(body.model_dump())
    raise_for_result(result)
    item = result.value
    response.headers["Location"] = f"/items/{item.id}"
    response.headers["ETag"] = record_etag(item)
    return serialize_item(item)


@router.get("/{item_id}")
def get_item(
    item_id: str,
    response: Response,
    store: ItemStore = Depends(get_item_store),
):
    result = store.get(item_id)
    raise_for_result(result)
    response.headers["ETag"] = record_etag(result.value)
    return serialize_item(result.value)


@router.put("/{item_id}")
def update_item(
    item_id: str,
    body: ItemBody,
    response: Response,
    if_match: Optional[str] = Header(None, alias="If-Match"),
    store: ItemStore = Depends(get_item_store),
):
    logger.info("PUT /items/%s if-match=%s", item_id, if_match)
    result = store.update(item_id, if_match, body.model_dump())
    raise_for_result(result)
    response.headers["ETag"] = record_etag(result.value)
    return serialize_item(result.value)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: str,
    if_match: Optional[str] = Header(None, alias="If-Match"),
    store: ItemStore = Depends(get_item_store),
):
    logger.info("DELETE /items/%s if-match=%s", item_id, if_match)
    result = store.delete(item_id, if_match)
    raise_for_result(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
