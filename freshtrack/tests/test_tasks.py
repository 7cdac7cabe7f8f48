"""Tests des vérifications périodiques d'expiration"""

import pytest

from freshtrack.core.config import settings
from freshtrack.tasks import (
    check_expiring_products,
    get_scheduler_status,
    send_daily_reminder,
    start_scheduler,
    stop_scheduler,
)
from freshtrack.tasks.expiry_checker import build_expiry_message
from freshtrack.tests.conftest import DAY, HOUR, NOW


def test_expiry_message_today(make_product):
    product = make_product(name="Milk", quantity=2, expiry_date=NOW + HOUR)

    assert build_expiry_message(product, NOW) == "Milk expires TODAY! Quantity: 2. Use it quickly."


def test_expiry_message_in_days(make_product):
    product = make_product(name="Yogurt", expiry_date=NOW + 2 * DAY)

    assert build_expiry_message(product, NOW) == (
        "Yogurt expires in 2 day(s) (16/11/2023). Quantity: 1."
    )


@pytest.mark.asyncio
async def test_check_expiring_products(memory_product_repository, make_product, clock):
    for product in [
        make_product(id="soon", name="Cheese", expiry_date=NOW + DAY),
        make_product(id="today", name="Ham", expiry_date=NOW + HOUR),
        make_product(id="later", expiry_date=NOW + 10 * DAY),
        make_product(id="muted", expiry_date=NOW + DAY, notification_enabled=False),
    ]:
        await memory_product_repository.insert_product(product)

    alerts = await check_expiring_products(memory_product_repository, clock=clock)

    assert [alert.product_id for alert in alerts] == ["today", "soon"]
    assert [alert.days_left for alert in alerts] == [0, 1]
    assert alerts[0].message.startswith("Ham expires TODAY!")


@pytest.mark.asyncio
async def test_check_expiring_products_custom_window(memory_product_repository, make_product, clock):
    await memory_product_repository.insert_product(make_product(id="far", expiry_date=NOW + 10 * DAY))

    assert await check_expiring_products(memory_product_repository, 3, clock=clock) == []
    alerts = await check_expiring_products(memory_product_repository, 10, clock=clock)
    assert [alert.product_id for alert in alerts] == ["far"]


@pytest.mark.asyncio
async def test_send_daily_reminder(product_repository, make_product, clock):
    for product in [
        make_product(expiry_date=NOW + HOUR),
        make_product(expiry_date=NOW + 2 * DAY),
        make_product(expiry_date=NOW - DAY),
        make_product(expiry_date=NOW + 20 * DAY),
    ]:
        await product_repository.insert_product(product)

    summary = await send_daily_reminder(product_repository, clock=clock)

    assert summary == {"expiring_soon": 2, "expiring_today": 1, "expired": 1}


@pytest.mark.asyncio
async def test_scheduler_registers_jobs(memory_product_repository, monkeypatch):
    monkeypatch.setattr(settings, "SCHEDULER_ENABLED", True)
    monkeypatch.setattr(settings, "DAILY_REMINDER_ENABLED", True)

    try:
        assert start_scheduler(memory_product_repository) is not None
        status = get_scheduler_status()
        assert status["running"] is True
        assert {job["id"] for job in status["jobs"]} == {"check_expiring", "daily_reminder"}
    finally:
        stop_scheduler()

    assert get_scheduler_status() == {"running": False, "jobs": []}


def test_scheduler_disabled(memory_product_repository, monkeypatch):
    monkeypatch.setattr(settings, "SCHEDULER_ENABLED", False)

    assert start_scheduler(memory_product_repository) is None
    assert get_scheduler_status()["running"] is False
