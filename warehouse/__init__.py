from .database import StorageError, WarehouseError, WarehouseStore
from .inventory import Added, Failed, InventoryService, Rejected
from .models import Floor, Pallet, Product
from .positions import Position, format_position, parse_position

__all__ = [
    "Added",
    "Failed",
    "Floor",
    "InventoryService",
    "Pallet",
    "Position",
    "Product",
    "Rejected",
    "StorageError",
    "WarehouseError",
    "WarehouseStore",
    "WarehouseTracker",
    "format_position",
    "parse_position",
]


def __getattr__(name: str):
    if name == "WarehouseTracker":
        from .tracker import WarehouseTracker  # noqa: WPS433 - lazy import

        return WarehouseTracker
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
