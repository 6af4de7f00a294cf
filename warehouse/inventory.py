"""Business operations on top of :class:`~warehouse.database.WarehouseStore`.

Commands and one-shot queries are coroutines; the blocking database call runs
in a worker thread via :func:`asyncio.to_thread`.  Live queries are returned
directly since subscribing does not wait for the database.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from .database import StorageError, WarehouseStore
from .live import LiveQuery
from .models import Floor, Product
from .positions import normalize_position, parse_position
from .validation import format_model, parse_int, validate_model, validate_quantity

logger = logging.getLogger(__name__)

# Reasons reported by :class:`Rejected`.
INVALID_MODEL = "model"
INVALID_QUANTITY = "quantity"
INVALID_POSITION = "position"


@dataclass(frozen=True)
class Added:
    """Product row was written."""

    product_id: int

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    """Input broke a validation rule; nothing was written.

    ``reason`` is one of :data:`INVALID_MODEL`, :data:`INVALID_QUANTITY` or
    :data:`INVALID_POSITION`.
    """

    reason: str

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class Failed:
    """Input was valid but the database refused the write."""

    cause: StorageError

    def __bool__(self) -> bool:
        return False


AddResult = Union[Added, Rejected, Failed]


class InventoryService:
    def __init__(self, store: WarehouseStore) -> None:
        self.store = store

    # ------------------------------------------------------------------
    # products
    # ------------------------------------------------------------------
    def all_products(self) -> LiveQuery[Product]:
        return self.store.all_products()

    def products_by_model(self, model: str) -> LiveQuery[Product]:
        return self.store.products_by_model(model)

    def products_by_floor(self, floor_number: int) -> LiveQuery[Product]:
        return self.store.products_by_floor(floor_number)

    def products_by_position(self, floor_number: int, position: str) -> LiveQuery[Product]:
        return self.store.products_by_position(floor_number, position)

    async def search_products_by_model(self, model: str) -> List[Product]:
        query = self.store.products_by_model(model)
        return await asyncio.to_thread(query.fetch)

    async def insert_product(self, product: Product) -> int:
        return await asyncio.to_thread(self.store.insert_product, product)

    async def update_product(self, product: Product) -> int:
        return await asyncio.to_thread(self.store.update_product, product)

    async def delete_product(self, product: Product) -> int:
        return await asyncio.to_thread(self.store.delete_product, product)

    async def delete_product_by_position(self, floor_number: int, position: str, model: str) -> int:
        return await asyncio.to_thread(
            self.store.delete_product_by_position, floor_number, position, model
        )

    async def update_quantity(self, product_id: int, quantity: int) -> int:
        return await asyncio.to_thread(self.store.update_quantity, product_id, quantity)

    async def delete_all_products(self) -> int:
        return await asyncio.to_thread(self.store.delete_all_products)

    # ------------------------------------------------------------------
    # floors
    # ------------------------------------------------------------------
    def all_floors(self) -> LiveQuery[Floor]:
        return self.store.all_floors()

    async def get_floor(self, floor_number: int) -> Optional[Floor]:
        return await asyncio.to_thread(self.store.get_floor, floor_number)

    async def insert_floor(self, floor: Floor) -> None:
        await asyncio.to_thread(self.store.insert_floor, floor)

    async def update_floor(self, floor: Floor) -> int:
        return await asyncio.to_thread(self.store.update_floor, floor)

    async def delete_floor(self, floor: Floor) -> int:
        return await asyncio.to_thread(self.store.delete_floor, floor)

    async def delete_all_floors(self) -> int:
        return await asyncio.to_thread(self.store.delete_all_floors)

    async def get_floor_count(self) -> int:
        return await asyncio.to_thread(self.store.floor_count)

    async def is_initialized(self) -> bool:
        return await self.get_floor_count() > 0

    # ------------------------------------------------------------------
    # business operations
    # ------------------------------------------------------------------
    async def initialize_warehouse(self) -> None:
        """Remove every product and floor, returning to the setup state."""

        await asyncio.to_thread(self.store.reset_warehouse)

    async def add_or_update_product(
        self,
        model: str,
        quantity: Union[int, str],
        floor_number: int,
        position: str,
    ) -> AddResult:
        """Validate the input and store it as a new product row.

        Every call that passes validation creates a new row, even when the
        same model is already stored at that position.
        """

        formatted_model = format_model(model)
        if not validate_model(formatted_model):
            return Rejected(INVALID_MODEL)
        if not validate_quantity(quantity):
            return Rejected(INVALID_QUANTITY)
        formatted_position = normalize_position(position)
        if parse_position(formatted_position) is None:
            return Rejected(INVALID_POSITION)

        product = Product(
            model=formatted_model,
            quantity=parse_int(str(quantity)),
            floor_number=floor_number,
            position=formatted_position,
        )
        try:
            product_id = await self.insert_product(product)
        except StorageError as exc:
            logger.warning("Could not add product %s: %s", formatted_model, exc)
            return Failed(exc)
        return Added(product_id)
