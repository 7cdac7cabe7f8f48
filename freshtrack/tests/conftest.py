"""Configuration et fixtures pytest"""

import asyncio

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from freshtrack.core.database import Database
from freshtrack.dao import CategoryDao, ProductDao
from freshtrack.domain.product import Category, Product
from freshtrack.main import create_app
from freshtrack.models.category import DEFAULT_CATEGORIES
from freshtrack.repositories import (
    InMemoryCategoryRepository,
    InMemoryProductRepository,
    SqlCategoryRepository,
    SqlProductRepository,
)
from freshtrack.utils.date_helpers import MILLIS_PER_DAY

NOW = 1_700_000_000_000
DAY = MILLIS_PER_DAY
HOUR = 60 * 60 * 1000


class Recorder:
    """Observateur de test : enregistre les émissions d'un flux"""

    def __init__(self):
        self.values = []
        self._event = asyncio.Event()

    def __call__(self, value):
        self.values.append(value)
        self._event.set()

    @property
    def latest(self):
        return self.values[-1]

    async def wait_for(self, predicate=lambda value: True, timeout: float = 2.0):
        async def _wait():
            while True:
                if self.values and predicate(self.values[-1]):
                    return self.values[-1]
                self._event.clear()
                await self._event.wait()

        return await asyncio.wait_for(_wait(), timeout)


@pytest.fixture
def make_recorder():
    return Recorder


@pytest.fixture
def clock():
    """Horloge figée pour des fenêtres temporelles déterministes"""
    return lambda: NOW


@pytest.fixture
def make_product():
    counter = {"value": 0}

    def _make(**overrides) -> Product:
        counter["value"] += 1
        fields = {
            "id": f"product-{counter['value']}",
            "name": f"Product {counter['value']}",
            "category": "Food",
            "expiry_date": NOW + 10 * DAY,
            "added_date": NOW - DAY,
        }
        fields.update(overrides)
        return Product(**fields)

    return _make


@pytest.fixture
def default_categories():
    return [Category(**values) for values in DEFAULT_CATEGORIES]


@pytest_asyncio.fixture
async def database(tmp_path):
    """Base SQLite sur fichier temporaire, ouverte puis fermée à chaque test"""
    db = Database(f"sqlite:///{tmp_path / 'test.db'}")
    await db.open()
    try:
        yield db
    finally:
        await db.close()


@pytest.fixture
def product_dao(database):
    return ProductDao(database)


@pytest.fixture
def category_dao(database):
    return CategoryDao(database)


@pytest.fixture
def product_repository(product_dao, clock):
    return SqlProductRepository(product_dao, clock=clock)


@pytest.fixture
def category_repository(category_dao):
    return SqlCategoryRepository(category_dao)


@pytest.fixture
def memory_product_repository(clock):
    return InMemoryProductRepository(clock=clock)


@pytest.fixture
def memory_category_repository(default_categories):
    return InMemoryCategoryRepository(default_categories)


@pytest.fixture(params=["sql", "memory"])
def any_product_repository(request, database, clock):
    """Les deux implémentations doivent respecter le même contrat"""
    if request.param == "sql":
        return SqlProductRepository(ProductDao(database), clock=clock)
    return InMemoryProductRepository(clock=clock)


@pytest.fixture(scope="function")
def client(tmp_path):
    """Client de test FastAPI sur une base dédiée"""
    database = Database(f"sqlite:///{tmp_path / 'api.db'}")
    app = create_app(database, enable_scheduler=False)

    with TestClient(app) as test_client:
        yield test_client
