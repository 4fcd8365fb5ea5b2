"""Catalog domain models — pure Python, no HTTP or storage dependencies."""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


class ItemStatus(str, Enum):
    DRAFT = "Draft"
    ACTIVE = "Active"
    HOLD = "Hold"
    DISCONTINUED = "Discontinued"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["ItemStatus"]:
        """Case-insensitive lookup by value or member name; None when unknown."""
        if raw is None:
            return None
        wanted = raw.strip().casefold()
        for status in cls:
            if wanted in (status.value.casefold(), status.name.casefold()):
                return status
        return None


@dataclass(frozen=True)
class ItemUom:
    uom: str
    coef: Decimal
    notes: Optional[str] = None


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    version: int = 0

    @property
    def identity(self) -> str:
        return self.id

    @property
    def natural_key(self) -> Optional[str]:
        return self.name


@dataclass(frozen=True)
class Item:
    id: str
    code: str
    name: str
    status: ItemStatus
    category_name: str
    uom_base: str
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    uoms: Tuple[ItemUom, ...] = field(default_factory=tuple)
    version: int = 0

    @property
    def identity(self) -> str:
        return self.id

    @property
    def natural_key(self) -> Optional[str]:
        return self.code
