"""State and commands offered to the screen layer.

:class:`WarehouseTracker` takes the raw text typed by the user, checks it and
forwards it to :class:`~warehouse.inventory.InventoryService`.  Failures never
raise; they end up in :attr:`WarehouseTracker.error_message`, a single slot
that the next failure overwrites and :meth:`clear_error_message` empties.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

from .database import StorageError
from .floor_map import FloorPlan, build_floor_plan
from .inventory import (
    INVALID_MODEL,
    INVALID_POSITION,
    INVALID_QUANTITY,
    Failed,
    InventoryService,
    Rejected,
)
from .layout_config import MAX_COLUMNS, MAX_FLOORS, MIN_COLUMNS, MIN_FLOORS, RESET_CONFIRMATION
from .models import Floor, Product
from .positions import normalize_position
from .validation import (
    format_model,
    parse_int,
    validate_columns,
    validate_floor_count,
    validate_floor_number,
    validate_model,
    validate_quantity,
)

logger = logging.getLogger(__name__)

MSG_MODEL_FORMAT = (
    "Invalid product model: use a letter followed by 4-6 letters, digits or hyphens"
)
MSG_QUANTITY = "Quantity must be a positive whole number"
MSG_POSITION = "Invalid position: use side, column and row, e.g. L3-2"
MSG_FLOOR_NUMBER = "Floor number must be a positive whole number"
MSG_COLUMNS = f"Columns must be between {MIN_COLUMNS} and {MAX_COLUMNS}"
MSG_FLOOR_COUNT = f"Number of floors must be between {MIN_FLOORS} and {MAX_FLOORS}"
MSG_FLOOR_CONFIG = "Enter the column layout of every floor"
MSG_MISSING_FIELDS = "Fill in all fields"
MSG_RESET_CONFIRMATION = f'Type "{RESET_CONFIRMATION}" to reset the warehouse'

_REJECTION_MESSAGES = {
    INVALID_MODEL: MSG_MODEL_FORMAT,
    INVALID_QUANTITY: MSG_QUANTITY,
    INVALID_POSITION: MSG_POSITION,
}


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


class WarehouseTracker:
    def __init__(self, service: InventoryService) -> None:
        self.service = service
        self.all_products = service.all_products()
        self.all_floors = service.all_floors()
        self.search_results: List[Product] = []
        self.is_initialized = False
        self.error_message = ""

    # ------------------------------------------------------------------
    # status and messages
    # ------------------------------------------------------------------
    def _fail(self, message: str) -> bool:
        self.error_message = message
        return False

    def _storage_failure(self, action: str, exc: StorageError) -> bool:
        logger.warning("%s: %s", action, exc)
        return self._fail(f"{action}: {exc}")

    def clear_error_message(self) -> None:
        self.error_message = ""

    async def check_initialization_status(self) -> bool:
        try:
            self.is_initialized = await self.service.is_initialized()
        except StorageError as exc:
            return self._storage_failure("Failed to read warehouse status", exc)
        return self.is_initialized

    # ------------------------------------------------------------------
    # floors
    # ------------------------------------------------------------------
    async def add_floor(self, floor_number: Any, left_columns: Any, right_columns: Any) -> bool:
        number = parse_int(floor_number)
        if not validate_floor_number(number):
            return self._fail(MSG_FLOOR_NUMBER)
        left = parse_int(left_columns)
        right = parse_int(right_columns)
        if not validate_columns(left) or not validate_columns(right):
            return self._fail(MSG_COLUMNS)
        try:
            await self.service.insert_floor(Floor(floor_number=number, left_columns=left, right_columns=right))
        except StorageError as exc:
            return self._storage_failure("Failed to add floor", exc)
        await self.check_initialization_status()
        return True

    async def setup_warehouse(
        self, floor_count: Any, column_pairs: Sequence[Tuple[Any, Any]]
    ) -> bool:
        """Create floors ``1..floor_count`` from ``(left, right)`` column pairs.

        Every pair is checked before the first floor is written.
        """

        count = parse_int(floor_count)
        if not validate_floor_count(count):
            return self._fail(MSG_FLOOR_COUNT)
        if len(column_pairs) != count:
            return self._fail(MSG_FLOOR_CONFIG)
        layout: List[Tuple[int, int]] = []
        for left_columns, right_columns in column_pairs:
            if _blank(left_columns) or _blank(right_columns):
                return self._fail(MSG_FLOOR_CONFIG)
            left = parse_int(left_columns)
            right = parse_int(right_columns)
            if not validate_columns(left) or not validate_columns(right):
                return self._fail(MSG_COLUMNS)
            layout.append((left, right))
        for number, (left, right) in enumerate(layout, start=1):
            if not await self.add_floor(number, left, right):
                return False
        logger.info("Warehouse set up with %d floors", count)
        return True

    def floor_plan(self, floor_number: int) -> Optional[FloorPlan]:
        """Build the plan of ``floor_number`` from the latest snapshots."""

        floors = self.all_floors.value
        if floors is None:
            floors = self.all_floors.fetch()
        floor = next((f for f in floors if f.floor_number == floor_number), None)
        if floor is None:
            return None
        products = self.all_products.value
        if products is None:
            products = self.all_products.fetch()
        return build_floor_plan(floor, products)

    # ------------------------------------------------------------------
    # products
    # ------------------------------------------------------------------
    async def search_product_by_model(self, model: str) -> List[Product]:
        if _blank(model):
            self.search_results = []
            return self.search_results
        formatted = format_model(model)
        if not validate_model(formatted):
            self._fail(MSG_MODEL_FORMAT)
            return self.search_results
        try:
            self.search_results = await self.service.search_products_by_model(formatted)
        except StorageError as exc:
            self._storage_failure("Failed to search products", exc)
        return self.search_results

    async def add_product(self, model: str, quantity: str, floor_number: Any, position: str) -> bool:
        if any(_blank(value) for value in (model, quantity, floor_number, position)):
            return self._fail(MSG_MISSING_FIELDS)
        if not validate_model(model):
            return self._fail(MSG_MODEL_FORMAT)
        if not validate_quantity(quantity):
            return self._fail(MSG_QUANTITY)
        number = parse_int(floor_number)
        if not validate_floor_number(number):
            return self._fail(MSG_FLOOR_NUMBER)

        result = await self.service.add_or_update_product(
            model, quantity, number, normalize_position(position)
        )
        if isinstance(result, Rejected):
            return self._fail(_REJECTION_MESSAGES[result.reason])
        if isinstance(result, Failed):
            return self._fail(f"Failed to add product: {result.cause}")
        return True

    async def update_product_quantity(self, product_id: int, quantity: str) -> bool:
        if not validate_quantity(quantity):
            return self._fail(MSG_QUANTITY)
        try:
            await self.service.update_quantity(product_id, parse_int(quantity))
        except StorageError as exc:
            return self._storage_failure("Failed to update quantity", exc)
        return True

    async def delete_product(self, product: Product) -> bool:
        try:
            await self.service.delete_product(product)
        except StorageError as exc:
            return self._storage_failure("Failed to delete product", exc)
        return True

    async def reset_warehouse(self, confirmation: str) -> bool:
        if (confirmation or "").strip() != RESET_CONFIRMATION:
            return self._fail(MSG_RESET_CONFIRMATION)
        try:
            await self.service.initialize_warehouse()
        except StorageError as exc:
            return self._storage_failure("Failed to reset warehouse", exc)
        self.is_initialized = False
        self.search_results = []
        return True
