"""Demo data, loaded by an explicit startup step."""
from __future__ import annotations
import logging

from craftify.application.category_store import CategoryStore
from craftify.application.item_store import ItemStore

logger = logging.getLogger(__name__)

DEMO_CATEGORIES = [
    "Component",
    "Fabrication",
    "Hardware",
    "Assembly",
    "Finished Good",
    "Consumable",
    "Kit",
]

DEMO_ITEMS = [
    {"code": "ITM-001", "name": "Widget A", "status": "Draft", "category_name": "Component", "uom_base": "pcs"},
    {"code": "ITM-002", "name": "Gadget B", "status": "Active", "category_name": "Hardware", "uom_base": "pcs"},
    {"code": "ITM-003", "name": "Assembly C", "status": "Hold", "category_name": "Assembly", "uom_base": "set"},
]


def seed_demo_data(categories: CategoryStore, items: ItemStore) -> None:
    """Populate empty stores. Stores that already hold records are left alone."""
    if categories.count() == 0:
        for name in DEMO_CATEGORIES:
            result = categories.create({"name": name})
            if not result.is_success:
                raise RuntimeError(f"Could not seed category '{name}': {result.error}")
        logger.info("Seeded %d demo categories", len(DEMO_CATEGORIES))

    if items.count() == 0:
        for data in DEMO_ITEMS:
            result = items.create(dict(data))
            if not result.is_success:
                raise RuntimeError(f"Could not seed item '{data['code']}': {result.error}")
        logger.info("Seeded %d demo items", len(DEMO_ITEMS))
