import pytest
from sqlalchemy.exc import ArgumentError, OperationalError

from warehouse.database import StorageError, WarehouseError, WarehouseStore
from warehouse.models import Floor, Pallet, Product


@pytest.fixture
def store(tmp_path):
    store = WarehouseStore(f"sqlite:///{tmp_path / 'warehouse.db'}")
    store.init_db()
    yield store
    store.dispose()


def _product(model="B1234", quantity=10, floor_number=1, position="L1-1"):
    return Product(model=model, quantity=quantity, floor_number=floor_number, position=position)


def test_floor_crud(store):
    assert store.floor_count() == 0
    assert store.get_floor(1) is None

    store.insert_floor(Floor(floor_number=2, left_columns=4, right_columns=6))
    store.insert_floor(Floor(floor_number=1, left_columns=5, right_columns=5))
    assert store.floor_count() == 2
    assert [f.floor_number for f in store.all_floors().fetch()] == [1, 2]

    floor = store.get_floor(2)
    assert (floor.left_columns, floor.right_columns) == (4, 6)

    floor.left_columns = 8
    assert store.update_floor(floor) == 1
    assert store.get_floor(2).left_columns == 8

    assert store.delete_floor(floor) == 1
    assert store.get_floor(2) is None
    assert store.delete_floor(floor) == 0

    assert store.delete_all_floors() == 1
    assert store.floor_count() == 0


def test_insert_floor_replaces_same_number(store):
    store.insert_floor(Floor(floor_number=1, left_columns=5, right_columns=5))
    store.insert_floor(Floor(floor_number=1, left_columns=2, right_columns=3))
    assert store.floor_count() == 1
    floor = store.get_floor(1)
    assert (floor.left_columns, floor.right_columns) == (2, 3)


def test_update_missing_floor_is_noop(store):
    assert store.update_floor(Floor(floor_number=9, left_columns=1, right_columns=1)) == 0
    assert store.floor_count() == 0


def test_insert_product_assigns_increasing_ids(store):
    first = store.insert_product(_product())
    second = store.insert_product(_product())
    assert second > first
    # same model and position still produce separate rows
    assert len(store.products_by_position(1, "L1-1").fetch()) == 2


def test_insert_product_with_id_replaces_row(store):
    product_id = store.insert_product(_product(quantity=1))
    store.insert_product(Product(id=product_id, model="C9999", quantity=4, floor_number=1, position="R2-2"))
    rows = store.all_products().fetch()
    assert len(rows) == 1
    assert (rows[0].id, rows[0].model, rows[0].quantity) == (product_id, "C9999", 4)


def test_product_queries(store):
    store.insert_product(_product(model="B1234", floor_number=2, position="R1-1"))
    store.insert_product(_product(model="B1234", floor_number=1, position="L2-1"))
    store.insert_product(_product(model="C5555", floor_number=1, position="L1-3"))

    ordered = [(p.floor_number, p.position) for p in store.all_products().fetch()]
    assert ordered == [(1, "L1-3"), (1, "L2-1"), (2, "R1-1")]

    assert {p.floor_number for p in store.products_by_model("B1234").fetch()} == {1, 2}
    assert [p.model for p in store.products_by_floor(1).fetch()] == ["B1234", "C5555"]
    assert [p.model for p in store.products_by_position(1, "L1-3").fetch()] == ["C5555"]
    assert store.products_by_model("Z0000").fetch() == []


def test_update_quantity_touches_only_quantity(store):
    product_id = store.insert_product(_product(quantity=10))
    assert store.update_quantity(product_id, 25) == 1
    (row,) = store.all_products().fetch()
    assert (row.model, row.quantity, row.floor_number, row.position) == ("B1234", 25, 1, "L1-1")
    assert store.update_quantity(product_id + 100, 3) == 0


def test_update_and_delete_product(store):
    product_id = store.insert_product(_product())
    (row,) = store.all_products().fetch()
    row.position = "R3-3"
    assert store.update_product(row) == 1
    assert store.products_by_position(1, "R3-3").fetch()[0].id == product_id

    assert store.delete_product(row) == 1
    assert store.all_products().fetch() == []
    assert store.delete_product(_product()) == 0


def test_delete_product_by_position(store):
    store.insert_product(_product(model="B1234"))
    store.insert_product(_product(model="C5555"))
    store.insert_product(_product(model="B1234", floor_number=2))
    assert store.delete_product_by_position(1, "L1-1", "B1234") == 1
    remaining = sorted((p.floor_number, p.model) for p in store.all_products().fetch())
    assert remaining == [(1, "C5555"), (2, "B1234")]


def test_reset_warehouse_clears_floors_and_products(store):
    store.insert_floor(Floor(floor_number=1, left_columns=5, right_columns=5))
    store.insert_product(_product())
    store.reset_warehouse()
    assert store.floor_count() == 0
    assert store.all_products().fetch() == []


def test_reset_warehouse_is_atomic(store, monkeypatch):
    store.insert_floor(Floor(floor_number=1, left_columns=5, right_columns=5))
    store.insert_product(_product())

    from warehouse import database

    real_delete = database.delete

    def failing_delete(model):
        if model is Floor:
            raise OperationalError("DELETE FROM floors", {}, Exception("disk I/O error"))
        return real_delete(model)

    monkeypatch.setattr(database, "delete", failing_delete)
    with pytest.raises(StorageError) as excinfo:
        store.reset_warehouse()
    assert excinfo.value.operation == "reset_warehouse"
    monkeypatch.undo()

    assert store.floor_count() == 1
    assert len(store.all_products().fetch()) == 1


def test_storage_error_without_tables(tmp_path):
    store = WarehouseStore(f"sqlite:///{tmp_path / 'empty.db'}")
    with pytest.raises(StorageError) as excinfo:
        store.floor_count()
    assert excinfo.value.operation == "floor_count"
    assert isinstance(excinfo.value.__cause__, OperationalError)


def test_integer_too_large_for_driver_raises_storage_error(store):
    store.insert_product(_product())

    with pytest.raises(StorageError) as excinfo:
        store.get_floor(10**20)
    assert excinfo.value.operation == "get_floor"
    assert isinstance(excinfo.value.__cause__, OverflowError)

    with pytest.raises(StorageError) as excinfo:
        store.update_quantity(1, 10**20)
    assert excinfo.value.operation == "update_quantity"
    assert store.all_products().fetch()[0].quantity == 10


def test_malformed_database_url_raises_storage_error():
    with pytest.raises(StorageError) as excinfo:
        WarehouseStore("not a database url")
    assert excinfo.value.operation == "open_database"
    assert isinstance(excinfo.value, WarehouseError)
    assert isinstance(excinfo.value.__cause__, ArgumentError)


def test_pallets_table_created(store):
    with store.session_scope() as session:
        session.add(Pallet(floor_number=1, position="L1-1", column=1, row=1, side="L"))
    from sqlalchemy import inspect

    assert set(inspect(store.engine).get_table_names()) >= {"floors", "products", "pallets"}


def test_in_memory_database_shared_between_threads():
    import threading

    store = WarehouseStore("sqlite://")
    store.init_db()
    worker = threading.Thread(
        target=store.insert_floor, args=(Floor(floor_number=1, left_columns=1, right_columns=1),)
    )
    worker.start()
    worker.join()
    assert store.floor_count() == 1
    store.dispose()
