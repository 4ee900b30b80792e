import asyncio

import pytest

from conftest import FakeDocumentStore, brand, category, product, remote
from seedsync.errors import TransientRemoteFailure
from seedsync.ingest.models import Brand, Category
from seedsync.sync.dry_run import DryRunBuilder
from seedsync.sync.sections import BRANDS, CATEGORIES, PRODUCTS, LocalSection, canonical_json


def _local(section, records):
    return LocalSection(section, [section.record_type.from_dict(r) for r in records], "digest")


@pytest.mark.asyncio
async def test_classifies_create_update_skip_and_orphans():
    store = FakeDocumentStore(
        {
            "brands": {
                "b1": remote(brand("b1")),
                "b2": remote(brand("b2", name="Old name")),
                "b9": remote(brand("b9")),
            }
        }
    )
    local = _local(BRANDS, [brand("b1"), brand("b2", name="New name"), brand("b3")])
    result = await DryRunBuilder(store).build_section(local)
    assert (result.will_create, result.will_update, result.will_skip, result.will_delete) == (1, 1, 1, 1)
    assert result.total_json == 3
    assert store.commits == []


@pytest.mark.asyncio
async def test_store_managed_fields_do_not_cause_updates():
    doc = remote(brand("b1"))
    doc["updatedAt"] = "something else"
    doc["extra"] = "ignored"
    store = FakeDocumentStore({"brands": {"b1": doc}})
    result = await DryRunBuilder(store).build_section(_local(BRANDS, [brand("b1")]))
    assert result.will_skip == 1


@pytest.mark.asyncio
async def test_missing_compare_field_remotely_is_an_update():
    doc = remote(brand("b1"))
    del doc["imageURL"]
    store = FakeDocumentStore({"brands": {"b1": doc}})
    result = await DryRunBuilder(store).build_section(_local(BRANDS, [brand("b1")]))
    assert result.will_update == 1


@pytest.mark.asyncio
async def test_list_fields_compare_by_value():
    store = FakeDocumentStore({"categories": {"c1": remote(category("c1", brand_ids=["b1", "b2"]))}})
    same = await DryRunBuilder(store).build_section(_local(CATEGORIES, [category("c1", brand_ids=["b1", "b2"])]))
    reordered = await DryRunBuilder(store).build_section(_local(CATEGORIES, [category("c1", brand_ids=["b2", "b1"])]))
    assert same.will_skip == 1
    assert reordered.will_update == 1


@pytest.mark.asyncio
async def test_integer_price_remotely_matches_float_locally():
    doc = remote(product("p1", price=899.0))
    doc["price"] = 899
    store = FakeDocumentStore({"products": {"p1": doc}})
    result = await DryRunBuilder(store).build_section(_local(PRODUCTS, [product("p1", price=899.0)]))
    assert result.will_skip == 1
    assert result.will_update == 0


@pytest.mark.asyncio
async def test_fractional_price_change_is_an_update():
    store = FakeDocumentStore({"products": {"p1": remote(product("p1", price=899.0))}})
    result = await DryRunBuilder(store).build_section(_local(PRODUCTS, [product("p1", price=899.5)]))
    assert result.will_update == 1


@pytest.mark.asyncio
async def test_report_covers_sections_in_order():
    store = FakeDocumentStore()
    report = await DryRunBuilder(store).build_report(
        [_local(BRANDS, [brand("b1"), brand("b2")]), _local(CATEGORIES, [])]
    )
    assert [s.name for s in report.sections] == ["brands", "categories"]
    assert report.section("brands").will_create == 2
    assert report.section("categories").total_json == 0
    assert not report.is_empty
    assert report.summary.splitlines()[0] == "Dry-run:"


@pytest.mark.asyncio
async def test_one_lookup_per_id_and_one_listing():
    store = FakeDocumentStore()
    await DryRunBuilder(store).build_section(_local(BRANDS, [brand("b1"), brand("b2")]))
    assert sorted(store.calls) == [("get", "brands", "b1"), ("get", "brands", "b2"), ("list", "brands")]


@pytest.mark.asyncio
async def test_listing_failure_cancels_lookups():
    cancelled = []

    class SlowStore(FakeDocumentStore):
        async def get_document(self, collection, doc_id):
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(doc_id)
                raise

        async def list_document_ids(self, collection):
            raise TransientRemoteFailure("UNAVAILABLE", "down")

    with pytest.raises(TransientRemoteFailure):
        await DryRunBuilder(SlowStore()).build_section(_local(BRANDS, [brand("b1"), brand("b2")]))
    assert sorted(cancelled) == ["b1", "b2"]


def test_canonical_json_ignores_insertion_order():
    left = {"name": "Acme", "isActive": True, "imageURL": "x"}
    right = {"imageURL": "x", "name": "Acme", "isActive": True}
    assert canonical_json(left) == canonical_json(right)
    assert BRANDS.same_content(left, right)


def test_same_content_detects_value_change():
    assert not BRANDS.same_content({"name": "Acme"}, {"name": "Acme Inc"})
    assert Brand.from_dict(brand("b1")).to_fields() == {
        "name": "Acme",
        "imageURL": "https://img.example.com/b1.png",
        "isActive": True,
    }
    assert Category.from_dict(category("c1")).to_fields()["brandIds"] == ["b1"]


def test_canonical_json_treats_integral_floats_as_ints():
    assert canonical_json({"price": 899.0, "tags": [1.0, 2.5]}) == canonical_json({"price": 899, "tags": [1, 2.5]})
    assert canonical_json({"isActive": True}) == '{"isActive":true}'
