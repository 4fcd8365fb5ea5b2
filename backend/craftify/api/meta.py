"""Health check and reference data."""
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends

from craftify.api.auth import require_principal
from craftify.core.config import KNOWN_UOMS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["meta"])


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/uoms", dependencies=[Depends(require_principal)])
def list_uoms():
    logger.info("GET /uoms")
    return list(KNOWN_UOMS)
