"""Versioned record contract shared by every stored resource kind."""
from __future__ import annotations
import dataclasses
from datetime import datetime, timezone
from typing import Any, Optional, Protocol, TypeVar


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class VersionedRecord(Protocol):
    """Anything a Collection can hold: an identity, a natural key and a version."""

    version: int

    @property
    def identity(self) -> str: ...

    @property
    def natural_key(self) -> Optional[str]: ...


R = TypeVar("R", bound=VersionedRecord)


def next_version(record: R, **changes: Any) -> R:
    """
    Return a copy of `record` with `changes` applied and the version bumped by one.
    Records are frozen dataclasses, so readers holding the old value never see a partial write.
    """
    if "updated_at" not in changes and hasattr(record, "updated_at"):
        changes["updated_at"] = now_utc()
    return dataclasses.replace(record, version=record.version + 1, **changes)
