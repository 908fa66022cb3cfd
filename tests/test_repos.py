import json
import uuid

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError, ResponseError

from storefront.domain.errors import DuplicateEntry, PersistenceError
from storefront.domain.identity import Identity
from storefront.domain.schemas import CartLine, WishlistEntry
from storefront.repos.cart_repo import (
    DeviceCartBackend,
    TableCartBackend,
    select_cart_backend,
)
from storefront.repos.device_store import MemoryDeviceStore, RedisDeviceStore, build_device_store
from storefront.repos.wishlist_repo import (
    DeviceWishlistBackend,
    TableWishlistBackend,
    select_wishlist_backend,
)


def line(pid, qty=1, price=100):
    return CartLine(product_id=pid, product_name=pid, product_price=price, product_image="", quantity=qty)


def test_select_backend_by_identity(db, device_store):
    user = Identity(user_id=uuid.uuid4(), device_id="d1")
    guest = Identity(device_id="d1")

    assert isinstance(select_cart_backend(user, db, device_store), TableCartBackend)
    assert isinstance(select_cart_backend(guest, db, device_store), DeviceCartBackend)
    assert isinstance(select_wishlist_backend(user, db, device_store), TableWishlistBackend)
    assert isinstance(select_wishlist_backend(guest, db, device_store), DeviceWishlistBackend)


def test_guest_without_device_is_rejected(db, device_store):
    with pytest.raises(ValueError):
        select_cart_backend(Identity(), db, device_store)
    with pytest.raises(ValueError):
        select_wishlist_backend(Identity(), db, device_store)


def test_device_cart_blob_is_single_json_list(device_store):
    backend = DeviceCartBackend(device_store, "d1")
    backend.upsert(line("A", 2))
    backend.upsert(line("B"))
    backend.upsert(line("A", 5))

    raw = json.loads(device_store.get("device:d1:cart_items"))
    assert [(i["product_id"], i["quantity"]) for i in raw] == [("A", 5), ("B", 1)]

    backend.clear()
    assert device_store.get("device:d1:cart_items") is None


def test_device_cart_rejects_corrupt_blob(device_store):
    device_store.set("device:d1:cart_items", json.dumps([{"product_id": "A"}]))
    with pytest.raises(PersistenceError):
        DeviceCartBackend(device_store, "d1").load()


def test_table_upsert_is_insert_or_update(db):
    user, other = uuid.uuid4(), uuid.uuid4()
    backend = TableCartBackend(db, user)

    backend.upsert(line("A", 1, price=100))
    backend.upsert(line("A", 4, price=120))
    TableCartBackend(db, other).upsert(line("A", 9))

    assert backend.load() == [line("A", 4, price=120)]
    assert [x.quantity for x in TableCartBackend(db, other).load()] == [9]


def test_table_clear_only_touches_owner(db):
    user, other = uuid.uuid4(), uuid.uuid4()
    TableCartBackend(db, user).upsert(line("A"))
    TableCartBackend(db, other).upsert(line("A"))

    TableCartBackend(db, user).clear()

    assert TableCartBackend(db, user).load() == []
    assert len(TableCartBackend(db, other).load()) == 1


@pytest.mark.parametrize("kind", ["device", "table"])
def test_wishlist_duplicate_insert_raises(kind, db, device_store):
    entry = WishlistEntry(product_id="A", product_name="A", product_price=1, product_image="")
    if kind == "device":
        backend = DeviceWishlistBackend(device_store, "d1")
    else:
        backend = TableWishlistBackend(db, uuid.uuid4())

    backend.insert(entry)
    with pytest.raises(DuplicateEntry):
        backend.insert(entry)
    assert len(backend.load()) == 1


def test_memory_store_roundtrip():
    store = MemoryDeviceStore()
    store.set("k", "v")
    assert store.get("k") == "v"
    store.delete("k")
    store.delete("k")
    assert store.get("k") is None


def test_build_device_store():
    assert isinstance(build_device_store("memory://"), MemoryDeviceStore)
    assert isinstance(build_device_store("redis://localhost:6379/0"), RedisDeviceStore)


def test_redis_errors_become_persistence_errors(monkeypatch):
    store = RedisDeviceStore("redis://localhost:6379/0")
    calls = []

    def down(*args, **kwargs):
        calls.append(args)
        raise RedisConnectionError("refused")

    monkeypatch.setattr(store.redis, "get", down)
    monkeypatch.setattr("time.sleep", lambda s: None)

    with pytest.raises(PersistenceError):
        store.get("device:d1:cart_items")
    # tenacity retried before giving up
    assert len(calls) == 3


def test_redis_command_errors_are_not_retried(monkeypatch):
    store = RedisDeviceStore("redis://localhost:6379/0")
    calls = []

    def wrong_type(*args, **kwargs):
        calls.append(args)
        raise ResponseError("WRONGTYPE Operation against a key holding the wrong kind of value")

    monkeypatch.setattr(store.redis, "get", wrong_type)

    with pytest.raises(PersistenceError):
        store.get("device:d1:cart_items")
    assert len(calls) == 1
