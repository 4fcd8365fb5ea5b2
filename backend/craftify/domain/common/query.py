"""
Query pipeline — free-text filter, field filters, deterministic sort and offset paging
over a point-in-time snapshot of a collection. Pure functions, no I/O, no locking.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Iterable, List, Mapping, Optional, Sequence, TypeVar

from craftify.domain.common.result import Result

T = TypeVar("T")

TextGetter = Callable[[T], Optional[str]]
FilterPredicate = Callable[[T, str], bool]


@dataclass(frozen=True)
class SortSpec:
    field: str
    descending: bool = False

    @property
    def direction(self) -> str:
        return "desc" if self.descending else "asc"

    def descriptor(self) -> str:
        return f"{self.field},{self.direction}"


@dataclass(frozen=True)
class QueryConfig:
    page: int = 0
    size: int = 20
    sort: Optional[str] = None
    q: Optional[str] = None
    filters: Mapping[str, Optional[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class Page(Generic[T]):
    content: List[T]
    page: int
    size: int
    total: int
    total_pages: int
    sort: List[str]


def parse_sort(raw: Optional[str], sortable: Iterable[str], default_field: str) -> SortSpec:
    """
    Parse "field,direction". Unknown fields fall back to `default_field`;
    anything other than "desc" (case-insensitive) means ascending.
    """
    if raw is None or not raw.strip():
        return SortSpec(default_field)
    parts = raw.split(",", 1)
    requested = parts[0].strip().lower()
    known = {name.lower(): name for name in sortable}
    field_name = known.get(requested, default_field)
    descending = len(parts) > 1 and parts[1].strip().lower() == "desc"
    return SortSpec(field_name, descending)


def total_pages(total: int, size: int) -> int:
    return max(1, math.ceil(total / size))


def validate_paging(page: int, size: int, max_size: int) -> Result[None]:
    errors: Dict[str, str] = {}
    if page < 0:
        errors["page"] = "must be greater than or equal to 0"
    if size < 1:
        errors["size"] = "must be greater than or equal to 1"
    elif size > max_size:
        errors["size"] = f"must be less than or equal to {max_size}"
    if errors:
        return Result.invalid(errors)
    return Result.ok(None)


class QueryPlan(Generic[T]):
    """
    Describes how one resource kind is searched, filtered and ordered.
    One plan per kind; the same plan backs list and export so both see identical predicates.
    """

    def __init__(
        self,
        identity: TextGetter,
        text_fields: Sequence[TextGetter],
        sort_fields: Mapping[str, TextGetter],
        default_sort: str,
        filters: Optional[Mapping[str, FilterPredicate]] = None,
    ):
        if default_sort not in sort_fields:
            raise ValueError(f"default sort field '{default_sort}' is not sortable")
        self._identity = identity
        self._text_fields = list(text_fields)
        self._sort_fields = dict(sort_fields)
        self._default_sort = default_sort
        self._filters = dict(filters or {})

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    def matches_text(self, record: T, q: Optional[str]) -> bool:
        if q is None or not q.strip():
            return True
        needle = q.strip().casefold()
        for getter in self._text_fields:
            value = getter(record)
            if value is not None and needle in value.casefold():
                return True
        return False

    def matches_filters(self, record: T, filters: Mapping[str, Optional[str]]) -> bool:
        for name, value in filters.items():
            if value is None or not str(value).strip():
                continue
            predicate = self._filters.get(name)
            if predicate is None:
                raise KeyError(f"unknown filter '{name}'")
            if not predicate(record, str(value).strip()):
                return False
        return True

    def select(self, records: Iterable[T], q: Optional[str], filters: Mapping[str, Optional[str]]) -> List[T]:
        return [r for r in records if self.matches_text(r, q) and self.matches_filters(r, filters)]

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------
    def resolve_sort(self, raw: Optional[str]) -> SortSpec:
        return parse_sort(raw, self._sort_fields.keys(), self._default_sort)

    def order(self, records: Iterable[T], spec: SortSpec) -> List[T]:
        """Case-insensitive order on the sort field, ties by identity, nulls last in both directions."""
        getter = self._sort_fields[spec.field]
        present, missing = [], []
        for record in records:
            (missing if getter(record) is None else present).append(record)
        present.sort(
            key=lambda r: (getter(r).casefold(), self._identity(r) or ""),
            reverse=spec.descending,
        )
        missing.sort(key=lambda r: self._identity(r) or "")
        return present + missing

    # ------------------------------------------------------------------
    # Full pass
    # ------------------------------------------------------------------
    def run(self, snapshot: Iterable[T], config: QueryConfig) -> Page[T]:
        selected = self.select(snapshot, config.q, config.filters)
        spec = self.resolve_sort(config.sort)
        ordered = self.order(selected, spec)

        total = len(ordered)
        start = min(max(config.page * config.size, 0), total)
        end = min(max(config.page * config.size + config.size, start), total)
        return Page(
            content=ordered[start:end],
            page=config.page,
            size=config.size,
            total=total,
            total_pages=total_pages(total, config.size),
            sort=[spec.descriptor()],
        )
