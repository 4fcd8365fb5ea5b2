"""Resource store behaviour: uniqueness, versioning, paging and delete rules."""
import threading

from craftify.application.category_store import CategoryStore
from craftify.domain.catalog.models import ItemStatus
from craftify.domain.common.query import QueryConfig
from craftify.domain.common.result import ErrorKind
from craftify.persistence.memory.in_memory_collection import InMemoryCollection


def _item(name="Widget", **overrides):
    data = {
        "name": name,
        "status": "Active",
        "category_name": "Component",
        "uom_base": "pcs",
    }
    data.update(overrides)
    return data


# ------------------------------------------------------------------
# Categories
# ------------------------------------------------------------------
def test_category_create_and_case_variant_conflict(category_store):
    created = category_store.create({"name": "Widgets"})
    assert created.is_success
    assert created.value.version == 0

    again = category_store.create({"name": "widgets"})
    assert not again.is_success
    assert again.kind is ErrorKind.CONFLICT
    assert category_store.count() == 1


def test_category_create_trims_and_rejects_blank(category_store):
    assert category_store.create({"name": "  Kit  "}).value.name == "Kit"
    blank = category_store.create({"name": "   "})
    assert blank.kind is ErrorKind.VALIDATION
    assert "name" in blank.field_errors
    too_long = category_store.create({"name": "x" * 101})
    assert too_long.kind is ErrorKind.VALIDATION


def test_category_rename_requires_current_token(category_store):
    cat = category_store.create({"name": "Hardware"}).value

    missing = category_store.rename(cat.id, None, {"name": "Tools"})
    assert missing.kind is ErrorKind.PRECONDITION_FAILED

    renamed = category_store.rename(cat.id, 'W/"0"', {"name": "Tools"})
    assert renamed.is_success
    assert renamed.value.name == "Tools"
    assert renamed.value.version == 1
    assert renamed.value.updated_at >= cat.updated_at


def test_category_rename_to_own_name_in_other_case_is_allowed(category_store):
    cat = category_store.create({"name": "Hardware"}).value
    result = category_store.rename(cat.id, 'W/"0"', {"name": "HARDWARE"})
    assert result.is_success
    assert result.value.name == "HARDWARE"


def test_category_rename_conflict_leaves_record_unchanged(category_store):
    category_store.create({"name": "Hardware"})
    cat = category_store.create({"name": "Tools"}).value

    result = category_store.rename(cat.id, 'W/"0"', {"name": "hardware"})
    assert result.kind is ErrorKind.CONFLICT
    assert category_store.get(cat.id).value == cat


def test_category_delete_in_use_needs_force():
    store = CategoryStore(InMemoryCollection(), in_use=lambda c: c.name == "Component")
    component = store.create({"name": "Component"}).value
    other = store.create({"name": "Kit"}).value

    blocked = store.delete(component.id)
    assert blocked.kind is ErrorKind.CONFLICT
    assert store.get(component.id).is_success

    assert store.delete(component.id, force=True).is_success
    assert store.get(component.id).kind is ErrorKind.NOT_FOUND

    assert store.delete(other.id).is_success


def test_category_delete_checks_token_only_when_supplied(category_store):
    cat = category_store.create({"name": "Kit"}).value
    assert category_store.delete(cat.id, 'W/"5"').kind is ErrorKind.PRECONDITION_FAILED
    assert category_store.delete(cat.id, 'W/"0"').is_success
    assert category_store.delete(cat.id).kind is ErrorKind.NOT_FOUND


def test_category_list_sorts_by_id_when_asked(category_store):
    for name in ["b", "a", "c"]:
        category_store.create({"name": name})
    page = category_store.list(QueryConfig(sort="id,asc", size=10)).value
    ids = [c.id for c in page.content]
    assert ids == sorted(ids, key=str.casefold)
    assert page.sort == ["id,asc"]


# ------------------------------------------------------------------
# Items
# ------------------------------------------------------------------
def test_item_generated_code_then_explicit_duplicate_conflicts(item_store):
    first = item_store.create(_item("Widget A"))
    assert first.is_success
    assert first.value.code == "ITM-001"
    assert first.value.id == "ITM-001"
    assert first.value.version == 0

    dup = item_store.create(_item("Widget B", code="ITM-001"))
    assert dup.kind is ErrorKind.CONFLICT

    dup_case = item_store.create(_item("Widget B", code="itm-001"))
    assert dup_case.kind is ErrorKind.CONFLICT


def test_item_generated_code_skips_taken_codes(item_store):
    item_store.create(_item("One", code="ITM-002"))
    generated = item_store.create(_item("Two")).value
    assert generated.code == "ITM-003"


def test_item_validation_reports_every_field(item_store):
    result = item_store.create({"name": " ", "status": "Bogus", "uoms": [{"uom": "box", "coef": 0}]})
    assert result.kind is ErrorKind.VALIDATION
    assert {"name", "status", "category_name", "uom_base", "uoms[0].coef"} <= set(result.field_errors)
    assert item_store.count() == 0


def test_item_create_trims_fields_and_parses_status(item_store):
    item = item_store.create(_item("  Bolt  ", status="hold", uom_base=" kg ", code=" B-1 ")).value
    assert item.name == "Bolt"
    assert item.uom_base == "kg"
    assert item.code == "B-1"
    assert item.status is ItemStatus.HOLD


def test_item_stale_token_then_fresh_token(item_store):
    item = item_store.create(_item("Widget")).value

    ok = item_store.update(item.id, 'W/"0"', _item("Widget v1"))
    assert ok.value.version == 1

    stale = item_store.update(item.id, 'W/"0"', _item("Widget v2"))
    assert stale.kind is ErrorKind.PRECONDITION_FAILED
    unchanged = item_store.get(item.id).value
    assert unchanged.version == 1
    assert unchanged.name == "Widget v1"

    retry = item_store.update(item.id, 'W/"1"', _item("Widget v2"))
    assert retry.is_success
    assert retry.value.version == 2


def test_item_failed_update_does_not_bump_version(item_store):
    item = item_store.create(_item("Widget")).value
    assert item_store.update(item.id, None, _item("x")).kind is ErrorKind.PRECONDITION_FAILED
    assert item_store.update(item.id, 'W/"0"', _item(" ")).kind is ErrorKind.VALIDATION
    assert item_store.update("nope", 'W/"0"', _item("x")).kind is ErrorKind.NOT_FOUND
    assert item_store.get(item.id).value == item


def test_item_code_change_is_uniqueness_checked(item_store):
    item_store.create(_item("A", code="A-1"))
    b = item_store.create(_item("B", code="B-1")).value

    clash = item_store.update(b.id, 'W/"0"', _item("B", code="a-1"))
    assert clash.kind is ErrorKind.CONFLICT

    moved = item_store.update(b.id, 'W/"0"', _item("B", code="B-2")).value
    assert moved.code == "B-2"
    assert moved.id == "B-1"


def test_item_blank_code_on_update_keeps_current_code(item_store):
    item = item_store.create(_item("A", code="A-1")).value
    updated = item_store.update(item.id, 'W/"0"', _item("A2", code="")).value
    assert updated.code == "A-1"


def test_item_delete_requires_token(item_store):
    item = item_store.create(_item("Widget")).value
    assert item_store.delete(item.id).kind is ErrorKind.PRECONDITION_FAILED
    assert item_store.delete(item.id, 'W/"9"').kind is ErrorKind.PRECONDITION_FAILED
    assert item_store.delete(item.id, 'W/"0"').is_success
    assert item_store.get(item.id).kind is ErrorKind.NOT_FOUND


def test_item_search_pages_over_matches(item_store):
    item_store.create(_item("Red Widget"))
    item_store.create(_item("Blue widget"))
    item_store.create(_item("Gadget"))

    page = item_store.list(QueryConfig(q="widget", page=0, size=1)).value
    assert len(page.content) == 1
    assert page.total == 2
    assert page.total_pages == 2


def test_item_filters_status_and_uom(item_store):
    item_store.create(_item("A", status="Draft", uom_base="PCS"))
    item_store.create(_item("B", status="Active", uom_base="kg"))
    item_store.create(_item("C", status="Active", uom_base="pcs"))

    page = item_store.list(QueryConfig(filters={"status": "Active", "uom": "Pcs"}, size=10)).value
    assert [i.name for i in page.content] == ["C"]


def test_item_list_rejects_bad_paging(item_store):
    assert item_store.list(QueryConfig(size=0)).kind is ErrorKind.VALIDATION
    assert item_store.list(QueryConfig(page=-1)).kind is ErrorKind.VALIDATION
    assert item_store.list(QueryConfig(size=51)).kind is ErrorKind.VALIDATION


def test_batch_delete_counts_distinct_ids_and_removes_nothing(item_store):
    a = item_store.create(_item("A", code="A-1")).value
    item_store.create(_item("B", code="B-1"))
    count = item_store.count_batch_delete(["A-1", "A-1", None, "  ", "ZZZ"])
    assert count == 2
    assert item_store.get("A-1").value == a
    assert item_store.count() == 2


# ------------------------------------------------------------------
# Upsert
# ------------------------------------------------------------------
def test_upsert_matches_code_case_insensitively(item_store):
    item = item_store.create(_item("Widget", code="ITM-001", description="keep me")).value

    result = item_store.upsert(_item("Widget Renamed", code="itm-001"))
    assert result.is_success
    updated, created = result.value
    assert not created
    assert updated.id == item.id
    assert updated.name == "Widget Renamed"
    assert updated.version == 1
    assert updated.description == "keep me"
    assert item_store.count() == 1


def test_upsert_creates_when_code_is_new_or_blank(item_store):
    record, created = item_store.upsert(_item("New", code="N-1")).value
    assert created and record.code == "N-1"
    record, created = item_store.upsert(_item("Generated")).value
    assert created and record.code.startswith("ITM-")


def test_upsert_create_only_rejects_existing_code(item_store):
    item = item_store.create(_item("Widget", code="ITM-001")).value
    result = item_store.upsert(_item("Other", code="ITM-001"), create_only=True)
    assert result.kind is ErrorKind.CONFLICT
    assert item_store.get(item.id).value == item


def test_upsert_never_merges_over_a_concurrent_token_update(item_store):
    item = item_store.create(_item("Widget", code="ITM-001", description="v0")).value
    barrier = threading.Barrier(2)
    results = {}

    def put():
        barrier.wait()
        results["put"] = item_store.update(item.id, 'W/"0"', _item("Put", code="ITM-001", description="from put"))

    def upsert():
        barrier.wait()
        results["upsert"] = item_store.upsert({"code": "ITM-001", "name": "Imported", "status": "Active",
                                               "category_name": "Component", "uom_base": "pcs"})

    threads = [threading.Thread(target=put), threading.Thread(target=upsert)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results["upsert"].is_success
    final = item_store.get(item.id).value
    assert final.name == "Imported"
    if results["put"].is_success:
        # upsert ran second and carried over what the token update wrote
        assert final.version == 2
        assert final.description == "from put"
    else:
        # upsert ran first, so the token update went stale
        assert results["put"].kind is ErrorKind.PRECONDITION_FAILED
        assert final.version == 1
        assert final.description == "v0"


def test_references_category(item_store):
    item_store.create(_item("A", category_name="Component"))
    assert item_store.references_category("component")
    assert not item_store.references_category("Kit")


# ------------------------------------------------------------------
# Concurrency
# ------------------------------------------------------------------
def test_concurrent_creates_of_same_name_admit_exactly_one(category_store):
    barrier = threading.Barrier(8)
    results = []

    def worker(i):
        barrier.wait()
        results.append(category_store.create({"name": "Widgets" if i % 2 else "WIDGETS"}))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(1 for r in results if r.is_success) == 1
    assert sum(1 for r in results if r.kind is ErrorKind.CONFLICT) == 7
    assert category_store.count() == 1


def test_concurrent_updates_with_same_token_admit_exactly_one(item_store):
    item = item_store.create(_item("Widget")).value
    barrier = threading.Barrier(6)
    results = []

    def worker(i):
        barrier.wait()
        results.append(item_store.update(item.id, 'W/"0"', _item(f"Widget {i}")))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(1 for r in results if r.is_success) == 1
    assert item_store.get(item.id).value.version == 1
