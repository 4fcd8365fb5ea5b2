"""Item store — business-code identities, unique case-insensitive codes, token-guarded deletes."""
from __future__ import annotations

from craftify.application.resource_store import ResourceStore
from craftify.domain.catalog.models import Item
from craftify.domain.catalog.queries import ITEM_QUERY_PLAN
from craftify.domain.catalog.rules import validate_item_content
from craftify.domain.catalog.service import CatalogDomainService, generate_item_code
from craftify.domain.common.result import Result
from craftify.domain.common.uniqueness import check_available, keys_equal
from craftify.persistence.interfaces.collection import Collection


class ItemStore(ResourceStore[Item]):
    kind = "Item"
    natural_key_field = "code"
    update_requires_token = True
    delete_requires_token = True

    def __init__(self, collection: Collection[Item], max_page_size: int = 500):
        super().__init__(collection, ITEM_QUERY_PLAN, max_page_size)
        self._domain = CatalogDomainService()

    def _validate(self, data: dict) -> Result[dict]:
        return validate_item_content(data)

    def _code_taken(self, code: str) -> bool:
        records = self._collection.list_all()
        if any(keys_equal(r.identity, code) for r in records):
            return True
        return not check_available(records, code)

    def _build(self, fields: dict) -> Result[Item]:
        code = fields.get("code")
        if code is None:
            code = generate_item_code(self._collection.count() + 1, self._code_taken)
        elif self._code_taken(code):
            return Result.conflict(f"Item with code '{code}' already exists.")
        return Result.ok(self._domain.create_item(code, fields))

    def _revise(self, record: Item, fields: dict) -> Item:
        return self._domain.revise_item(record, fields)

    def _carry_over(self, record: Item, data: dict) -> dict:
        merged = {"description": record.description, "uoms": record.uoms}
        merged.update(data)
        return merged

    def references_category(self, category_name: str) -> bool:
        return any(keys_equal(item.category_name, category_name) for item in self.snapshot())
