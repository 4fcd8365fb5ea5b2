"""Dependency injection container — one store instance per resource kind, wired to its collection."""
from __future__ import annotations
from functools import lru_cache

from craftify.application.category_store import CategoryStore
from craftify.application.item_store import ItemStore
from craftify.core.config import CATEGORY_IN_USE_NAMES, MAX_PAGE_SIZE
from craftify.domain.catalog.models import Category
from craftify.domain.common.uniqueness import fold_key
from craftify.persistence.memory.in_memory_collection import InMemoryCollection


@lru_cache(maxsize=1)
def get_item_store() -> ItemStore:
    return ItemStore(InMemoryCollection(), max_page_size=MAX_PAGE_SIZE)


@lru_cache(maxsize=1)
def get_category_store() -> CategoryStore:
    items = get_item_store()
    reserved = {fold_key(name) for name in CATEGORY_IN_USE_NAMES}

    def in_use(category: Category) -> bool:
        return fold_key(category.name) in reserved or items.references_category(category.name)

    return CategoryStore(InMemoryCollection(), in_use=in_use, max_page_size=MAX_PAGE_SIZE)


def reset_stores() -> None:
    """Drop the current store instances; the next request builds fresh, empty ones."""
    get_category_store.cache_clear()
    get_item_store.cache_clear()
