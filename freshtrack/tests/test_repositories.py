"""Tests des repositories (SQL et mémoire partagent le même contrat)"""

import pytest

from freshtrack.domain.product import Category
from freshtrack.tests.conftest import DAY, NOW


@pytest.mark.asyncio
async def test_recently_expired_product_is_listed(any_product_repository, make_product):
    product = make_product(id="old-milk", expiry_date=NOW - 1000)
    await any_product_repository.insert_product(product)

    expired = await any_product_repository.get_expired_products().first()

    assert product.is_expired(NOW)
    assert [p.id for p in expired] == ["old-milk"]


@pytest.mark.asyncio
async def test_consumed_product_stays_in_storage(any_product_repository, make_product):
    await any_product_repository.insert_product(make_product(id="apple"))
    await any_product_repository.insert_product(make_product(id="pear"))

    await any_product_repository.mark_as_consumed("apple")

    active = await any_product_repository.get_all_products().first()
    stored = await any_product_repository.get_product_by_id_once("apple")

    assert [p.id for p in active] == ["pear"]
    assert stored.is_consumed
    assert await any_product_repository.get_active_product_count().first() == 1


@pytest.mark.asyncio
async def test_discarded_product_is_not_active(any_product_repository, make_product):
    await any_product_repository.insert_product(make_product(id="fish"))
    await any_product_repository.mark_as_discarded("fish")

    assert await any_product_repository.get_all_products().first() == []
    assert (await any_product_repository.get_product_by_id_once("fish")).is_discarded


@pytest.mark.asyncio
async def test_expiring_window_bounds(any_product_repository, make_product):
    await any_product_repository.insert_product(make_product(id="edge-end", expiry_date=NOW + 3 * DAY))
    await any_product_repository.insert_product(make_product(id="edge-start", expiry_date=NOW))
    await any_product_repository.insert_product(make_product(id="inside", expiry_date=NOW + DAY))
    await any_product_repository.insert_product(make_product(id="too-late", expiry_date=NOW + 3 * DAY + 1))
    await any_product_repository.insert_product(make_product(id="past", expiry_date=NOW - 1))
    await any_product_repository.insert_product(
        make_product(id="muted", expiry_date=NOW + DAY, notification_enabled=False)
    )
    await any_product_repository.insert_product(
        make_product(id="eaten", expiry_date=NOW + DAY, is_consumed=True)
    )
    await any_product_repository.insert_product(
        make_product(id="thrown", expiry_date=NOW + DAY, is_discarded=True)
    )

    expiring = await any_product_repository.get_expiring_products(3)

    assert [p.id for p in expiring] == ["edge-start", "inside", "edge-end"]


@pytest.mark.asyncio
async def test_hard_delete_removes_record(any_product_repository, make_product):
    await any_product_repository.insert_product(make_product(id="gone"))
    await any_product_repository.delete_product("gone")

    assert await any_product_repository.get_product_by_id_once("gone") is None
    assert await any_product_repository.get_product_by_id("gone").first() is None


@pytest.mark.asyncio
async def test_update_product(any_product_repository, make_product):
    product = make_product(id="jam", quantity=2)
    await any_product_repository.insert_product(product)

    await any_product_repository.update_product(product.with_changes(name="Jam", quantity=0))

    stored = await any_product_repository.get_product_by_id_once("jam")
    assert stored.name == "Jam"
    assert stored.quantity == 1


@pytest.mark.asyncio
async def test_live_product_by_id_follows_changes(any_product_repository, make_product, make_recorder):
    await any_product_repository.insert_product(make_product(id="soup"))
    recorder = make_recorder()

    subscription = any_product_repository.get_product_by_id("soup").subscribe(recorder)
    await recorder.wait_for(lambda p: p is not None and not p.is_consumed)

    await any_product_repository.mark_as_consumed("soup")
    await recorder.wait_for(lambda p: p.is_consumed)
    subscription.dispose()


@pytest.mark.asyncio
async def test_identical_snapshots_are_not_re_emitted(any_product_repository, make_product, make_recorder):
    await any_product_repository.insert_product(make_product(id="rice", category="Food"))
    recorder = make_recorder()

    subscription = any_product_repository.get_products_by_category("Food").subscribe(recorder)
    await recorder.wait_for(lambda rows: len(rows) == 1)

    await any_product_repository.insert_product(make_product(id="shampoo", category="Cosmetics"))
    await any_product_repository.insert_product(make_product(id="pasta", category="Food"))
    await recorder.wait_for(lambda rows: len(rows) == 2)

    assert [len(rows) for rows in recorder.values] == [1, 2]
    subscription.dispose()


@pytest.mark.asyncio
async def test_barcode_lookup(any_product_repository, make_product):
    await any_product_repository.insert_product(make_product(id="cola", barcode="12345678"))

    assert (await any_product_repository.get_product_by_barcode("12345678")).id == "cola"
    assert await any_product_repository.get_product_by_barcode("87654321") is None


@pytest.mark.asyncio
async def test_category_repository_crud(category_repository):
    snacks = Category(name="Snacks", color_hex="#FF9800", icon="cookie", sort_order=5)

    await category_repository.insert_category(snacks)
    await category_repository.update_category(snacks.model_copy(update={"icon": "bakery"}))

    assert (await category_repository.get_category_by_name("Snacks")).icon == "bakery"
    assert len(await category_repository.get_all_categories().first()) == 6

    await category_repository.delete_category("Snacks")
    assert await category_repository.get_category_by_name("Snacks") is None
    assert await category_repository.get_category_by_name("Unknown") is None


@pytest.mark.asyncio
async def test_new_subscription_sees_completed_write(product_repository, make_product):
    await product_repository.insert_product(make_product(id="tea"))

    products = await product_repository.get_all_products().first()

    assert [p.id for p in products] == ["tea"]
