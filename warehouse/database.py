"""Database access for the warehouse inventory.

:class:`WarehouseStore` owns the SQLModel engine and exposes the floor and
product operations used by :mod:`warehouse.inventory`.  Reads that the screen
layer keeps on display are returned as :class:`~warehouse.live.LiveQuery`
objects which are refreshed after every committed write to their table.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from sqlalchemy import delete, func, update
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from .live import LiveQuery, QueryHub
from .models import Floor, Pallet, Product

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./warehouse.db"

FLOOR_TABLE = Floor.__tablename__
PRODUCT_TABLE = Product.__tablename__


class WarehouseError(Exception):
    """Base class for errors raised by the warehouse package."""


class StorageError(WarehouseError):
    """Raised when the database rejects or fails an operation."""

    def __init__(self, operation: str, message: str = "") -> None:
        self.operation = operation
        self.message = message
        text = f"{operation} failed"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)


def default_database_url() -> str:
    return os.getenv("WAREHOUSE_DATABASE_URL", DEFAULT_DATABASE_URL)


def default_database_echo() -> bool:
    return os.getenv("WAREHOUSE_DATABASE_ECHO", "False").lower() == "true"


def _is_memory_url(database_url: str) -> bool:
    url = make_url(database_url)
    return url.drivername.startswith("sqlite") and url.database in (None, "", ":memory:")


class WarehouseStore:
    """Floors and products kept in a local relational database."""

    def __init__(self, database_url: Optional[str] = None, echo: Optional[bool] = None) -> None:
        self.database_url = database_url or default_database_url()
        if echo is None:
            echo = default_database_echo()
        connect_args = (
            {"check_same_thread": False} if self.database_url.startswith("sqlite") else {}
        )
        engine_kwargs = {}
        try:
            # every connection to ``sqlite://`` would otherwise get its own database
            if _is_memory_url(self.database_url):
                engine_kwargs["poolclass"] = StaticPool
            self.engine = create_engine(
                self.database_url, echo=echo, connect_args=connect_args, **engine_kwargs
            )
        except (ArgumentError, ImportError) as exc:
            raise StorageError("open_database", str(exc)) from exc
        self.hub = QueryHub()

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def init_db(self) -> None:
        """Create the ``floors``, ``products`` and ``pallets`` tables."""

        logger.info("Ensuring warehouse tables are created")
        try:
            SQLModel.metadata.create_all(
                self.engine,
                tables=[
                    Floor.__table__,
                    Product.__table__,
                    Pallet.__table__,
                ],
            )
        except SQLAlchemyError as exc:
            raise StorageError("init_db", str(exc)) from exc
        logger.info("Warehouse tables confirmed")

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def session_scope(
        self, operation: str = "transaction", tables: Iterable[str] = ()
    ) -> Iterator[Session]:
        """Provide a transactional scope around a series of operations.

        Database failures are raised as :class:`StorageError`.  After a
        successful commit the live queries reading any of ``tables`` are
        refreshed.
        """

        try:
            with Session(self.engine, expire_on_commit=False) as session:
                try:
                    yield session
                    session.commit()
                except Exception:
                    session.rollback()
                    raise
        # the sqlite3 driver raises OverflowError for integers it cannot bind
        except (SQLAlchemyError, OverflowError) as exc:
            logger.warning("Storage operation %s failed: %s", operation, exc)
            raise StorageError(operation, str(exc)) from exc
        if tables:
            self.hub.notify(tables)

    def _fetch_all(self, operation: str, statement) -> list:
        with self.session_scope(operation) as session:
            return list(session.exec(statement).all())

    def _live(self, name: str, statement, *tables: str) -> LiveQuery:
        return LiveQuery(
            lambda: self._fetch_all(name, statement),
            tables,
            self.hub,
            name=name,
        )

    # ------------------------------------------------------------------
    # floors
    # ------------------------------------------------------------------
    def all_floors(self) -> LiveQuery[Floor]:
        statement = select(Floor).order_by(Floor.floor_number)
        return self._live("all_floors", statement, FLOOR_TABLE)

    def get_floor(self, floor_number: int) -> Optional[Floor]:
        with self.session_scope("get_floor") as session:
            return session.get(Floor, floor_number)

    def insert_floor(self, floor: Floor) -> None:
        """Insert ``floor``, replacing any floor with the same number."""

        with self.session_scope("insert_floor", (FLOOR_TABLE,)) as session:
            session.merge(floor)
        logger.debug("Stored floor %s", floor.floor_number)

    def update_floor(self, floor: Floor) -> int:
        with self.session_scope("update_floor", (FLOOR_TABLE,)) as session:
            result = session.exec(
                update(Floor)
                .where(Floor.floor_number == floor.floor_number)
                .values(left_columns=floor.left_columns, right_columns=floor.right_columns)
            )
            return result.rowcount

    def delete_floor(self, floor: Floor) -> int:
        with self.session_scope("delete_floor", (FLOOR_TABLE,)) as session:
            result = session.exec(
                delete(Floor).where(Floor.floor_number == floor.floor_number)
            )
            return result.rowcount

    def delete_all_floors(self) -> int:
        with self.session_scope("delete_all_floors", (FLOOR_TABLE,)) as session:
            return session.exec(delete(Floor)).rowcount

    def floor_count(self) -> int:
        with self.session_scope("floor_count") as session:
            return session.exec(select(func.count()).select_from(Floor)).one()

    # ------------------------------------------------------------------
    # products
    # ------------------------------------------------------------------
    def all_products(self) -> LiveQuery[Product]:
        statement = select(Product).order_by(Product.floor_number, Product.position, Product.id)
        return self._live("all_products", statement, PRODUCT_TABLE)

    def products_by_model(self, model: str) -> LiveQuery[Product]:
        statement = select(Product).where(Product.model == model).order_by(Product.id)
        return self._live("products_by_model", statement, PRODUCT_TABLE)

    def products_by_floor(self, floor_number: int) -> LiveQuery[Product]:
        statement = (
            select(Product).where(Product.floor_number == floor_number).order_by(Product.id)
        )
        return self._live("products_by_floor", statement, PRODUCT_TABLE)

    def products_by_position(self, floor_number: int, position: str) -> LiveQuery[Product]:
        statement = (
            select(Product)
            .where(Product.floor_number == floor_number, Product.position == position)
            .order_by(Product.id)
        )
        return self._live("products_by_position", statement, PRODUCT_TABLE)

    def insert_product(self, product: Product) -> int:
        """Store ``product`` and return its id.

        A product without an id always becomes a new row; one with an id
        replaces the stored row with that id.
        """

        with self.session_scope("insert_product", (PRODUCT_TABLE,)) as session:
            stored = session.merge(product)
            session.flush()
            product_id = stored.id
        logger.debug(
            "Stored product %s x%s at floor %s %s (id %s)",
            product.model,
            product.quantity,
            product.floor_number,
            product.position,
            product_id,
        )
        return product_id

    def update_product(self, product: Product) -> int:
        if product.id is None:
            return 0
        with self.session_scope("update_product", (PRODUCT_TABLE,)) as session:
            result = session.exec(
                update(Product)
                .where(Product.id == product.id)
                .values(
                    model=product.model,
                    quantity=product.quantity,
                    floor_number=product.floor_number,
                    position=product.position,
                )
            )
            return result.rowcount

    def delete_product(self, product: Product) -> int:
        if product.id is None:
            return 0
        with self.session_scope("delete_product", (PRODUCT_TABLE,)) as session:
            return session.exec(delete(Product).where(Product.id == product.id)).rowcount

    def delete_product_by_position(self, floor_number: int, position: str, model: str) -> int:
        with self.session_scope("delete_product_by_position", (PRODUCT_TABLE,)) as session:
            result = session.exec(
                delete(Product).where(
                    Product.floor_number == floor_number,
                    Product.position == position,
                    Product.model == model,
                )
            )
            return result.rowcount

    def delete_all_products(self) -> int:
        with self.session_scope("delete_all_products", (PRODUCT_TABLE,)) as session:
            return session.exec(delete(Product)).rowcount

    def update_quantity(self, product_id: int, quantity: int) -> int:
        with self.session_scope("update_quantity", (PRODUCT_TABLE,)) as session:
            result = session.exec(
                update(Product).where(Product.id == product_id).values(quantity=quantity)
            )
            return result.rowcount

    # ------------------------------------------------------------------
    # whole warehouse
    # ------------------------------------------------------------------
    def reset_warehouse(self) -> None:
        """Delete all products and then all floors in one transaction."""

        with self.session_scope("reset_warehouse", (PRODUCT_TABLE, FLOOR_TABLE)) as session:
            products = session.exec(delete(Product)).rowcount
            floors = session.exec(delete(Floor)).rowcount
        logger.info("Warehouse reset: removed %s products and %s floors", products, floors)
