"""Wiring of store, service and tracker for an application process."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from dotenv import load_dotenv

from .database import WarehouseStore
from .inventory import InventoryService
from .tracker import WarehouseTracker

load_dotenv()

logger = logging.getLogger(__name__)

_store: Optional[WarehouseStore] = None
_store_lock = threading.Lock()


def create_store(database_url: Optional[str] = None) -> WarehouseStore:
    """Return a new store for ``database_url`` with its tables created."""

    store = WarehouseStore(database_url)
    store.init_db()
    logger.info("Opened warehouse database %s", store.engine.url)
    return store


def get_store() -> WarehouseStore:
    """Return the store shared by the whole process, creating it on first use."""

    global _store
    with _store_lock:
        if _store is None:
            _store = create_store()
        return _store


def reset_store() -> None:
    """Dispose the shared store so the next :func:`get_store` opens a new one."""

    global _store
    with _store_lock:
        if _store is not None:
            _store.dispose()
            _store = None


def create_tracker(store: Optional[WarehouseStore] = None) -> WarehouseTracker:
    if store is None:
        store = get_store()
    return WarehouseTracker(InventoryService(store))
