# storefront/repos/wishlist_repo.py
import json
from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.wishlist_item import WishlistItemModel
from storefront.domain.errors import DuplicateEntry, PersistenceError
from storefront.domain.identity import Identity
from storefront.domain.schemas import WishlistEntry
from storefront.repos.device_store import DeviceStore
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

WISHLIST_BLOB_KEY = "wishlist_items"


class WishlistBackend(ABC):
    @abstractmethod
    def load(self) -> List[WishlistEntry]: ...

    @abstractmethod
    def insert(self, entry: WishlistEntry) -> None:
        """Raises DuplicateEntry when the product is already saved."""

    @abstractmethod
    def delete(self, product_id: str) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...


class DeviceWishlistBackend(WishlistBackend):
    def __init__(self, store: DeviceStore, device_id: str):
        self.store = store
        self.key = f"device:{device_id}:{WISHLIST_BLOB_KEY}"

    def load(self) -> List[WishlistEntry]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            return [WishlistEntry.model_validate(item) for item in json.loads(raw)]
        except (ValueError, ValidationError) as e:
            raise PersistenceError(f"Corrupted wishlist blob under {self.key}: {e}") from e

    def _save(self, entries: List[WishlistEntry]) -> None:
        self.store.set(self.key, json.dumps([e.model_dump() for e in entries]))

    def insert(self, entry: WishlistEntry) -> None:
        entries = self.load()
        if any(e.product_id == entry.product_id for e in entries):
            raise DuplicateEntry(entry.product_id)
        entries.append(entry)
        self._save(entries)

    def delete(self, product_id: str) -> None:
        self._save([e for e in self.load() if e.product_id != product_id])

    def clear(self) -> None:
        self.store.delete(self.key)


class TableWishlistBackend(WishlistBackend):
    def __init__(self, db: Session, user_id: UUID):
        self.db = db
        self.user_id = user_id

    def load(self) -> List[WishlistEntry]:
        try:
            rows = self.db.execute(
                select(WishlistItemModel)
                .where(WishlistItemModel.user_id == self.user_id)
                .order_by(WishlistItemModel.id)
            ).scalars().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Failed to load wishlist items") from e

        return [
            WishlistEntry(
                product_id=r.product_id,
                product_name=r.product_name,
                product_price=r.product_price,
                product_image=r.product_image,
            )
            for r in rows
        ]

    def insert(self, entry: WishlistEntry) -> None:
        try:
            self.db.add(WishlistItemModel(user_id=self.user_id, **entry.model_dump()))
            self.db.commit()
        except IntegrityError as e:
            # u_wishlist_user_product
            self.db.rollback()
            raise DuplicateEntry(entry.product_id) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"wishlist_items insert failed for user {self.user_id}: {e}")
            raise PersistenceError("Failed to add wishlist item") from e

    def _delete(self, stmt, action: str) -> None:
        try:
            self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"wishlist_items {action} failed for user {self.user_id}: {e}")
            raise PersistenceError(f"Failed to {action} wishlist items") from e

    def delete(self, product_id: str) -> None:
        self._delete(
            delete(WishlistItemModel).where(
                WishlistItemModel.user_id == self.user_id,
                WishlistItemModel.product_id == product_id,
            ),
            "delete",
        )

    def clear(self) -> None:
        self._delete(delete(WishlistItemModel).where(WishlistItemModel.user_id == self.user_id), "clear")


def select_wishlist_backend(identity: Identity, db: Session, device_store: DeviceStore) -> WishlistBackend:
    if identity.is_authenticated:
        return TableWishlistBackend(db, identity.user_id)
    if not identity.device_id:
        raise ValueError("Guest wishlist requires a device id")
    return DeviceWishlistBackend(device_store, identity.device_id)
