"""Domain service — pure record construction for categories and items. No I/O, no locking."""
from __future__ import annotations
import uuid
from typing import Callable

from craftify.domain.catalog.models import Category, Item
from craftify.domain.common.records import next_version, now_utc

ITEM_CODE_PREFIX = "ITM-"


def _new_id() -> str:
    return str(uuid.uuid4())


def format_item_code(sequence: int) -> str:
    return f"{ITEM_CODE_PREFIX}{sequence:03d}"


def generate_item_code(start: int, is_taken: Callable[[str], bool]) -> str:
    """First ITM-NNN code at or after `start` that `is_taken` rejects."""
    sequence = max(start, 1)
    code = format_item_code(sequence)
    while is_taken(code):
        sequence += 1
        code = format_item_code(sequence)
    return code


class CatalogDomainService:
    """
    Builds new record values from validated payloads.
    Existing records are never modified; every change yields a new value one version ahead.
    """

    def create_category(self, fields: dict) -> Category:
        now = now_utc()
        return Category(
            id=_new_id(),
            name=fields["name"],
            created_at=now,
            updated_at=now,
            version=0,
        )

    def rename_category(self, category: Category, fields: dict) -> Category:
        return next_version(category, name=fields["name"])

    def create_item(self, code: str, fields: dict) -> Item:
        now = now_utc()
        return Item(
            id=code,
            code=code,
            name=fields["name"],
            status=fields["status"],
            category_name=fields["category_name"],
            uom_base=fields["uom_base"],
            description=fields.get("description"),
            uoms=fields.get("uoms", ()),
            created_at=now,
            updated_at=now,
            version=0,
        )

    def revise_item(self, item: Item, fields: dict) -> Item:
        """Full replacement of the mutable fields. A blank code keeps the current one."""
        return next_version(
            item,
            code=fields.get("code") or item.code,
            name=fields["name"],
            status=fields["status"],
            category_name=fields["category_name"],
            uom_base=fields["uom_base"],
            description=fields.get("description"),
            uoms=fields.get("uoms", ()),
        )
