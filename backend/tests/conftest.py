import pytest
from fastapi.testclient import TestClient

from craftify import container
from craftify.application.category_store import CategoryStore
from craftify.application.item_store import ItemStore
from craftify.core import config
from craftify.persistence.memory.in_memory_collection import InMemoryCollection


@pytest.fixture
def item_store():
    return ItemStore(InMemoryCollection(), max_page_size=50)


@pytest.fixture
def category_store():
    return CategoryStore(InMemoryCollection(), max_page_size=50)


@pytest.fixture
def client(monkeypatch):
    """App with fresh, empty stores (no demo seed)."""
    monkeypatch.setattr(config, "SEED_DEMO_DATA", False)
    container.reset_stores()
    from craftify.main import app
    with TestClient(app) as c:
        yield c
    container.reset_stores()


@pytest.fixture
def seeded_client(monkeypatch):
    monkeypatch.setattr(config, "SEED_DEMO_DATA", True)
    container.reset_stores()
    from craftify.main import app
    with TestClient(app) as c:
        yield c
    container.reset_stores()
