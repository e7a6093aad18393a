"""Shared fixtures for inventory tracker tests."""

from collections.abc import Callable

import pytest

from inventory_tracker.services.products import Product
from inventory_tracker.services.storage import PersistenceError


class MemoryStorage:
    """In-memory stand-in for KeyValueStorage."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})
        self.writes = 0

    async def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.writes += 1
        self.items[key] = value


class FailingStorage:
    """Storage whose every call fails."""

    async def get_item(self, key: str) -> str | None:
        raise PersistenceError("disk unavailable")

    async def set_item(self, key: str, value: str) -> None:
        raise PersistenceError("disk unavailable")


@pytest.fixture
def memory_storage() -> MemoryStorage:
    """Empty in-memory storage."""
    return MemoryStorage()


@pytest.fixture
def make_product() -> Callable[..., Product]:
    """Factory for products with sensible defaults."""
    counter = iter(range(1_700_000_000_000, 1_800_000_000_000))

    def _make(**overrides: object) -> Product:
        fields: dict[str, object] = {
            "id": next(counter),
            "name": "Arroz",
            "quantity": 1,
            "price": 1.0,
            "weight": 0.0,
            "expiry_date": None,
            "category": "Mercearia",
        }
        fields.update(overrides)
        return Product(**fields)

    return _make


@pytest.fixture
def failing_storage() -> FailingStorage:
    """Storage that raises PersistenceError on every call."""
    return FailingStorage()
