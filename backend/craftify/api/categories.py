"""Category CRUD API endpoints."""
from __future__ import annotations
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Response, status
from pydantic import BaseModel

from craftify.api.auth import require_principal
from craftify.api.errors import raise_for_result
from craftify.application.category_store import CategoryStore
from craftify.container import get_category_store
from craftify.core.config import DEFAULT_PAGE_SIZE
from craftify.domain.catalog.models import Category
from craftify.domain.common.concurrency import record_etag
from craftify.domain.common.query import QueryConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"], dependencies=[Depends(require_principal)])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class CategoryBody(BaseModel):
    name: Optional[str] = None


# ------------------------------------------------------------------
# Serializers
# ------------------------------------------------------------------
def _serialize_category(c: Category) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "createdAt": c.created_at.isoformat(),
        "updatedAt": c.updated_at.isoformat(),
        "version": c.version,
    }


# ------------------------------------------------------------------
# Category endpoints
# ------------------------------------------------------------------
@router.get("")
def list_categories(
    page: int = Query(0),
    size: int = Query(DEFAULT_PAGE_SIZE),
    sort: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    store: CategoryStore = Depends(get_category_store),
):
    logger.info("GET /categories page=%s size=%s sort=%s q=%s", page, size, sort, q)
    result = store.list(QueryConfig(page=page, size=size, sort=sort, q=q))
    raise_for_result(result)
    p = result.value
    return {
        "content": [_serialize_category(c) for c in p.content],
        "page": p.page,
        "size": p.size,
        "totalElements": p.total,
        "totalPages": p.total_pages,
        "sort": p.sort,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryBody,
    response: Response,
    store: CategoryStore = Depends(get_category_store),
):
    logger.info("POST /categories name=%s", body.name)
    result = store.create(body.model_dump())
    raise_for_result(result)
    category = result.value
    response.headers["Location"] = f"/categories/{category.id}"
    response.headers["ETag"] = record_etag(category)
    return _serialize_category(category)


@router.get("/{category_id}")
def get_category(
    category_id: str,
    response: Response,
    store: CategoryStore = Depends(get_category_store),
):
    result = store.get(category_id)
    raise_for_result(result)
    response.headers["ETag"] = record_etag(result.value)
    return _serialize_category(result.value)


@router.patch("/{category_id}")
def rename_category(
    category_id: str,
    body: CategoryBody,
    response: Response,
    if_match: Optional[str] = Header(None, alias="If-Match"),
    store: CategoryStore = Depends(get_category_store),
):
    logger.info("PATCH /categories/%s name=%s if-match=%s", category_id, body.name, if_match)
    result = store.rename(category_id, if_match, body.model_dump())
    raise_for_result(result)
    response.headers["ETag"] = record_etag(result.value)
    return _serialize_category(result.value)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    force: bool = Query(False),
    if_match: Optional[str] = Header(None, alias="If-Match"),
    store: CategoryStore = Depends(get_category_store),
):
    logger.info("DELETE /categories/%s force=%s", category_id, force)
    result = store.delete(category_id, if_match, force=force)
    raise_for_result(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
