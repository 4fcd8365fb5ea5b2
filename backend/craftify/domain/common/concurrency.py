"""Optimistic concurrency gate: weak validator tokens derived from record versions."""
from __future__ import annotations
from enum import Enum
from typing import Optional

from craftify.domain.common.records import VersionedRecord


class GateOutcome(str, Enum):
    OK = "ok"
    MISSING = "missing"
    STALE = "stale"


def etag_for(version: int) -> str:
    """W/"<version>" — a weak entity tag."""
    return f'W/"{version}"'


def record_etag(record: VersionedRecord) -> str:
    return etag_for(record.version)


def authorize(record: VersionedRecord, supplied_token: Optional[str]) -> GateOutcome:
    if supplied_token is None or not supplied_token.strip():
        return GateOutcome.MISSING
    if supplied_token.strip() != record_etag(record):
        return GateOutcome.STALE
    return GateOutcome.OK


def describe(outcome: GateOutcome, record: VersionedRecord) -> str:
    if outcome is GateOutcome.MISSING:
        return "If-Match header with the current version token is required."
    return (
        f"Version token is stale; current token for '{record.identity}' "
        f"is {record_etag(record)}. Refetch and retry."
    )
