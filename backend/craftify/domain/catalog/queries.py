"""Query plans for each catalog resource kind."""
from __future__ import annotations

from craftify.domain.catalog.models import Category, Item
from craftify.domain.common.query import QueryPlan

CATEGORY_QUERY_PLAN: QueryPlan[Category] = QueryPlan(
    identity=lambda c: c.id,
    text_fields=[lambda c: c.name],
    sort_fields={"name": lambda c: c.name, "id": lambda c: c.id},
    default_sort="name",
)


def _status_matches(item: Item, value: str) -> bool:
    return item.status is not None and item.status.value == value


def _uom_matches(item: Item, value: str) -> bool:
    return item.uom_base is not None and item.uom_base.casefold() == value.casefold()


ITEM_QUERY_PLAN: QueryPlan[Item] = QueryPlan(
    identity=lambda i: i.id,
    text_fields=[lambda i: i.code, lambda i: i.name],
    sort_fields={"name": lambda i: i.name, "code": lambda i: i.code},
    default_sort="name",
    filters={"status": _status_matches, "uom": _uom_matches},
)
