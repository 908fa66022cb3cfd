import uuid

import pytest

from storefront.domain.errors import PersistenceError
from storefront.domain.schemas import AddOutcome, ProductIn
from storefront.repos.wishlist_repo import DeviceWishlistBackend, TableWishlistBackend
from storefront.services.wishlist_service import WishlistService


def item(pid):
    return ProductIn(product_id=pid, product_name=f"Product {pid}", product_price=500, product_image="")


@pytest.fixture(params=["device", "table"])
def wishlist(request, device_store, db):
    if request.param == "device":
        return WishlistService(DeviceWishlistBackend(device_store, "device-1"))
    return WishlistService(TableWishlistBackend(db, uuid.uuid4()))


def test_add_contains_count(wishlist):
    assert wishlist.add(item("A")) is AddOutcome.ADDED
    assert wishlist.add(item("B")) is AddOutcome.ADDED

    assert wishlist.contains("A")
    assert not wishlist.contains("Z")
    assert wishlist.count == 2


def test_duplicate_add_signals_already_exists(wishlist):
    wishlist.add(item("A"))

    assert wishlist.add(item("A")) is AddOutcome.ALREADY_EXISTS
    assert wishlist.count == 1
    assert wishlist.notice.title == "Already in Wishlist"


def test_duplicate_detected_even_when_view_is_stale(db):
    user = uuid.uuid4()
    stale = WishlistService(TableWishlistBackend(db, user))
    WishlistService(TableWishlistBackend(db, user)).add(item("A"))

    assert stale.add(item("A")) is AddOutcome.ALREADY_EXISTS


def test_remove(wishlist):
    wishlist.add(item("A"))
    wishlist.add(item("B"))

    assert wishlist.remove("A")
    assert [e.product_id for e in wishlist.entries] == ["B"]
    assert wishlist.remove("missing")
    assert wishlist.count == 1


def test_failed_add_reports_failure(device_store):
    class Broken(DeviceWishlistBackend):
        def _save(self, entries):
            raise PersistenceError("down")

    wishlist = WishlistService(Broken(device_store, "d1"))

    assert wishlist.add(item("A")) is AddOutcome.FAILED
    assert wishlist.entries == []
    assert wishlist.notice.level == "error"


def test_switch_backend_merge_skips_duplicates(device_store, db):
    guest = DeviceWishlistBackend(device_store, "d1")
    account = TableWishlistBackend(db, uuid.uuid4())
    WishlistService(account).add(item("A"))

    wishlist = WishlistService(guest)
    wishlist.add(item("A"))
    wishlist.add(item("X"))

    assert wishlist.switch_backend(account, merge=True)
    assert sorted(e.product_id for e in wishlist.entries) == ["A", "X"]
    assert WishlistService(guest).entries == []


def test_switch_backend_replace_keeps_guest_entries(device_store, db):
    guest = DeviceWishlistBackend(device_store, "d1")
    account = TableWishlistBackend(db, uuid.uuid4())

    wishlist = WishlistService(guest)
    wishlist.add(item("X"))

    assert wishlist.switch_backend(account) is False
    assert wishlist.entries == []
    assert [e.product_id for e in WishlistService(guest).entries] == ["X"]


def test_switch_to_unreadable_account_hides_guest_entries(device_store, db):
    class Unreadable(TableWishlistBackend):
        def load(self):
            raise PersistenceError("database down")

    guest = DeviceWishlistBackend(device_store, "d1")
    wishlist = WishlistService(guest)
    wishlist.add(item("X"))

    assert wishlist.switch_backend(Unreadable(db, uuid.uuid4()), merge=True) is False
    assert wishlist.entries == []
    assert not wishlist.contains("X")
    assert wishlist.notice.message == "Failed to load wishlist items"
    assert [e.product_id for e in WishlistService(guest).entries] == ["X"]
