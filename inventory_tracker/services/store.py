"""Product store: the authoritative in-memory collection and its persistence.

The whole collection is read once at startup and rewritten in full after
every mutation. Mutations are serialized by a lock held across the change
and its save, so the persisted collection always matches memory once the
last call returns.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Iterable

from pydantic import TypeAdapter, ValidationError

from inventory_tracker.config import settings
from inventory_tracker.services.numbers import parse_int_input
from inventory_tracker.services.products import (
    Product,
    ProductInput,
    coerce_product_fields,
)
from inventory_tracker.services.storage import KeyValueStorage, PersistenceError

logger = logging.getLogger(__name__)

_collection_adapter = TypeAdapter(list[Product])


class ProductNotFoundError(Exception):
    """Raised when an operation targets a product id that does not exist."""


def serialize_products(products: Iterable[Product]) -> str:
    """Serialize products to the persisted JSON array format."""
    return _collection_adapter.dump_json(list(products), by_alias=True).decode()


def deserialize_products(payload: str) -> list[Product]:
    """Parse the persisted JSON array format.

    Raises:
        pydantic.ValidationError: If the payload is not a valid product array.
    """
    return _collection_adapter.validate_json(payload)


class ProductStore:
    """Owner of the product collection.

    Products are kept newest first. The store is created by the application
    and handed to whatever needs to read or mutate the collection.
    """

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        storage_key: str | None = None,
        products: Iterable[Product] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the store.

        Args:
            storage: Key-value storage backend. Defaults to the database.
            storage_key: Slot holding the serialized collection.
            products: Initial in-memory products, newest first.
            clock: Returns the current time in seconds, used for new ids.
        """
        self.storage = storage or KeyValueStorage()
        self.storage_key = storage_key or settings.storage_key
        self._products: list[Product] = list(products or [])
        self._clock = clock
        self._lock = asyncio.Lock()

    @property
    def products(self) -> list[Product]:
        """Snapshot of the collection in store order."""
        return list(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def get(self, product_id: int) -> Product:
        """Return the product with the given id.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        for product in self._products:
            if product.id == product_id:
                return product
        raise ProductNotFoundError(f"Product {product_id} not found")

    async def load(self) -> list[Product]:
        """Replace the in-memory collection with the persisted one.

        A missing slot or a payload that does not parse yields an empty
        collection. If storage cannot be read, the current in-memory
        collection is kept.

        Returns:
            The loaded products.
        """
        async with self._lock:
            return await self._load()

    async def _load(self) -> list[Product]:
        try:
            payload = await self.storage.get_item(self.storage_key)
        except PersistenceError as e:
            logger.error("Could not load products, keeping in-memory state: %s", e)
            return self.products

        if not payload:
            self._products = []
            return []

        try:
            products = deserialize_products(payload)
        except ValidationError as e:
            logger.warning(
                "Discarding unreadable product payload under %s: %s",
                self.storage_key,
                e,
            )
            products = []

        self._products = products
        logger.info("Loaded %d products", len(products))
        return self.products

    async def save(self, products: Iterable[Product] | None = None) -> bool:
        """Overwrite the persisted collection.

        Failures are logged and never raised; the in-memory collection stays
        authoritative for the session.

        Args:
            products: Collection to persist. Defaults to the store's own.

        Returns:
            True if the write succeeded.
        """
        async with self._lock:
            return await self._persist(products)

    async def _persist(self, products: Iterable[Product] | None = None) -> bool:
        payload = serialize_products(self._products if products is None else products)
        try:
            await self.storage.set_item(self.storage_key, payload)
        except PersistenceError as e:
            logger.error("Could not save products: %s", e)
            return False
        return True

    def _next_id(self) -> int:
        candidate = int(self._clock() * 1000)
        existing = {product.id for product in self._products}
        while candidate in existing:
            candidate += 1
        return candidate

    async def add(self, data: ProductInput) -> Product:
        """Create a product from form input and put it first.

        Raises:
            ProductValidationError: If the name is blank. Nothing changes.
        """
        fields = coerce_product_fields(data)
        async with self._lock:
            product = Product(id=self._next_id(), **fields)
            self._products.insert(0, product)
            await self._persist()
        return product

    async def update(self, product_id: int, data: ProductInput) -> Product:
        """Replace a product's fields from form input, keeping its id.

        Raises:
            ProductValidationError: If the name is blank. Nothing changes.
            ProductNotFoundError: If no product has this id.
        """
        fields = coerce_product_fields(data)
        async with self._lock:
            product = self.get(product_id)
            for name, value in fields.items():
                setattr(product, name, value)
            await self._persist()
        return product

    async def remove(self, product_id: int) -> bool:
        """Delete a product. Unknown ids are ignored.

        Returns:
            True if a product was removed.
        """
        async with self._lock:
            remaining = [product for product in self._products if product.id != product_id]
            if len(remaining) == len(self._products):
                logger.debug("Ignoring removal of unknown product %s", product_id)
                return False
            self._products = remaining
            await self._persist()
        return True

    async def adjust_quantity(self, product_id: int, delta: int) -> Product | None:
        """Add ``delta`` to a product's quantity, clamping at zero.

        Unknown ids are ignored.

        Returns:
            The adjusted product, or None if the id is unknown.
        """
        async with self._lock:
            try:
                product = self.get(product_id)
            except ProductNotFoundError:
                logger.debug("Ignoring quantity change for unknown product %s", product_id)
                return None
            product.quantity = max(0, parse_int_input(product.quantity) + delta)
            await self._persist()
        return product
