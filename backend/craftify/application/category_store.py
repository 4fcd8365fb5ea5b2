"""Category store — UUID identities, unique case-insensitive names, in-use guarded deletes."""
from __future__ import annotations
from typing import Callable, Optional

from craftify.application.resource_store import ResourceStore
from craftify.domain.catalog.models import Category
from craftify.domain.catalog.queries import CATEGORY_QUERY_PLAN
from craftify.domain.catalog.rules import validate_category_content
from craftify.domain.catalog.service import CatalogDomainService
from craftify.domain.common.result import Result
from craftify.persistence.interfaces.collection import Collection

InUsePredicate = Callable[[Category], bool]


def never_in_use(category: Category) -> bool:
    return False


class CategoryStore(ResourceStore[Category]):
    kind = "Category"
    natural_key_field = "name"
    update_requires_token = True
    delete_requires_token = False

    def __init__(
        self,
        collection: Collection[Category],
        in_use: Optional[InUsePredicate] = None,
        max_page_size: int = 500,
    ):
        super().__init__(collection, CATEGORY_QUERY_PLAN, max_page_size)
        self._domain = CatalogDomainService()
        self._in_use = in_use or never_in_use

    def _validate(self, data: dict) -> Result[dict]:
        return validate_category_content(data)

    def _build(self, fields: dict) -> Result[Category]:
        return Result.ok(self._domain.create_category(fields))

    def _revise(self, record: Category, fields: dict) -> Category:
        return self._domain.rename_category(record, fields)

    def _delete_blocked(self, record: Category, force: bool) -> Optional[str]:
        if force:
            return None
        if self._in_use(record):
            return f"Category '{record.name}' is in use. Pass force=true to delete it anyway."
        return None

    def rename(self, identity: str, supplied_token: Optional[str], data: dict) -> Result[Category]:
        return self.update(identity, supplied_token, data)
