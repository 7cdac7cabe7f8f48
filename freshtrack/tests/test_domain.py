"""Tests du modèle de domaine et du classement d'urgence"""

import pytest
from pydantic import ValidationError

from freshtrack.domain.product import (
    Category,
    ExpiryUrgency,
    Product,
    category_to_domain,
    category_to_entity,
    entity_values,
    product_to_domain,
    product_to_entity,
    urgency_for_days,
)
from freshtrack.models.product import ProductEntity
from freshtrack.tests.conftest import DAY, HOUR, NOW


@pytest.mark.parametrize(
    "offset, expected_days",
    [
        (DAY, 1),
        (23 * HOUR, 0),
        (-HOUR, 0),
        (-1000, 0),
        (-23 * HOUR, 0),
        (-25 * HOUR, -1),
        (7 * DAY, 7),
        (8 * DAY - 1, 7),
        (-2 * DAY, -2),
    ],
)
def test_days_until_expiry_truncates_toward_zero(make_product, offset, expected_days):
    product = make_product(expiry_date=NOW + offset)
    assert product.days_until_expiry(NOW) == expected_days


def test_one_day_left_is_critical(make_product):
    product = make_product(expiry_date=NOW + DAY)

    assert product.days_until_expiry(NOW) == 1
    assert product.get_urgency(NOW) == ExpiryUrgency.CRITICAL


def test_expired_under_a_day_still_reports_zero_days(make_product):
    product = make_product(expiry_date=NOW - 1000)

    assert product.is_expired(NOW)
    assert product.days_until_expiry(NOW) == 0
    assert product.get_urgency(NOW) == ExpiryUrgency.CRITICAL


def test_is_expired_is_strict(make_product):
    product = make_product(expiry_date=NOW)

    assert not product.is_expired(NOW)
    assert product.is_expired(NOW + 1)


@pytest.mark.parametrize(
    "days, urgency",
    [
        (-1, ExpiryUrgency.EXPIRED),
        (0, ExpiryUrgency.CRITICAL),
        (2, ExpiryUrgency.CRITICAL),
        (3, ExpiryUrgency.WARNING),
        (7, ExpiryUrgency.WARNING),
        (8, ExpiryUrgency.SAFE),
    ],
)
def test_urgency_boundaries(days, urgency):
    assert urgency_for_days(days) == urgency


def test_urgency_buckets_partition_days():
    buckets = {}
    for days in range(-30, 31):
        buckets.setdefault(urgency_for_days(days), []).append(days)

    assert set(buckets) == set(ExpiryUrgency)
    assert max(buckets[ExpiryUrgency.EXPIRED]) < min(buckets[ExpiryUrgency.CRITICAL])
    assert max(buckets[ExpiryUrgency.CRITICAL]) < min(buckets[ExpiryUrgency.WARNING])
    assert max(buckets[ExpiryUrgency.WARNING]) < min(buckets[ExpiryUrgency.SAFE])


def test_urgency_depends_only_on_expiry_and_now(make_product):
    first = make_product(expiry_date=NOW + 5 * DAY, name="Milk", quantity=3)
    second = make_product(expiry_date=NOW + 5 * DAY, name="Aspirin", category="Medicine")

    assert first.get_urgency(NOW) == second.get_urgency(NOW) == ExpiryUrgency.WARNING
    assert first.get_urgency(NOW + 3 * DAY) == ExpiryUrgency.CRITICAL


def test_quantity_is_clamped(make_product):
    assert make_product(quantity=0).quantity == 1
    assert make_product(quantity=4).with_changes(quantity=-2).quantity == 1


def test_with_changes_keeps_id(make_product):
    product = make_product()
    changed = product.with_changes(id="other", name="Renamed")

    assert changed.id == product.id
    assert changed.name == "Renamed"
    assert product.name != "Renamed"


def test_create_assigns_id_and_added_date():
    product = Product.create(now_ms=NOW, name="Yogurt", category="Food", expiry_date=NOW + DAY)

    assert product.id
    assert product.added_date == NOW
    assert product.notification_enabled
    assert not product.is_consumed
    assert not product.is_discarded


def test_product_round_trip(make_product):
    entity = ProductEntity(
        id="abc",
        name="Cheese",
        barcode="123456789",
        category="Food",
        expiry_date=NOW + DAY,
        added_date=NOW,
        quantity=2,
        notes="Top shelf",
        image_uri="file://cheese.png",
        notification_enabled=False,
        is_consumed=True,
        is_discarded=False,
    )

    assert entity_values(product_to_entity(product_to_domain(entity))) == entity_values(entity)

    product = make_product(notes="n", barcode="42")
    assert product_to_domain(product_to_entity(product)) == product


def test_category_round_trip():
    category = Category(name="Snacks", color_hex="#FFAA00", icon="cookie", sort_order=5)
    assert category_to_domain(category_to_entity(category)) == category


def test_category_color_must_be_hex():
    with pytest.raises(ValidationError):
        Category(name="Bad", color_hex="red", icon="x")
