# storefront/repos/cart_repo.py
import json
from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy import delete, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import PersistenceError
from storefront.domain.identity import Identity
from storefront.domain.schemas import CartLine
from storefront.repos.device_store import DeviceStore
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CART_BLOB_KEY = "cart_items"

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CartBackend(ABC):
    """Where cart lines of the current identity live."""

    @abstractmethod
    def load(self) -> List[CartLine]: ...

    @abstractmethod
    def upsert(self, line: CartLine) -> None: ...

    @abstractmethod
    def set_quantity(self, product_id: str, quantity: int) -> None: ...

    @abstractmethod
    def delete(self, product_id: str) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...


class DeviceCartBackend(CartBackend):
    """Guest cart: one JSON blob per device."""

    def __init__(self, store: DeviceStore, device_id: str):
        self.store = store
        self.key = f"device:{device_id}:{CART_BLOB_KEY}"

    def load(self) -> List[CartLine]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            return [CartLine.model_validate(item) for item in json.loads(raw)]
        except (ValueError, ValidationError) as e:
            raise PersistenceError(f"Corrupted cart blob under {self.key}: {e}") from e

    def _save(self, lines: List[CartLine]) -> None:
        self.store.set(self.key, json.dumps([line.model_dump() for line in lines]))

    def upsert(self, line: CartLine) -> None:
        lines = self.load()
        for index, existing in enumerate(lines):
            if existing.product_id == line.product_id:
                lines[index] = line
                break
        else:
            lines.append(line)
        self._save(lines)

    def set_quantity(self, product_id: str, quantity: int) -> None:
        lines = [
            line.model_copy(update={"quantity": quantity}) if line.product_id == product_id else line
            for line in self.load()
        ]
        self._save(lines)

    def delete(self, product_id: str) -> None:
        self._save([line for line in self.load() if line.product_id != product_id])

    def clear(self) -> None:
        self.store.delete(self.key)


class TableCartBackend(CartBackend):
    """Signed-in cart: rows in cart_items keyed by (user_id, product_id)."""

    def __init__(self, db: Session, user_id: UUID):
        self.db = db
        self.user_id = user_id

    def _write(self, stmt, action: str) -> None:
        try:
            self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"cart_items {action} failed for user {self.user_id}: {e}")
            raise PersistenceError(f"Failed to {action} cart items") from e

    def load(self) -> List[CartLine]:
        try:
            rows = self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.user_id == self.user_id)
                .order_by(CartItemModel.id)
            ).scalars().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError("Failed to load cart items") from e

        return [
            CartLine(
                product_id=r.product_id,
                product_name=r.product_name,
                product_price=r.product_price,
                product_image=r.product_image,
                quantity=r.quantity,
            )
            for r in rows
        ]

    def upsert(self, line: CartLine) -> None:
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise PersistenceError(f"Upsert not supported on {dialect}")

        stmt = insert(CartItemModel).values(user_id=self.user_id, **line.model_dump())
        # INSERT ... ON CONFLICT (user_id, product_id) DO UPDATE
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "product_id"],
            set_={
                "product_name": stmt.excluded.product_name,
                "product_price": stmt.excluded.product_price,
                "product_image": stmt.excluded.product_image,
                "quantity": stmt.excluded.quantity,
            },
        )
        self._write(stmt, "upsert")

    def set_quantity(self, product_id: str, quantity: int) -> None:
        self._write(
            update(CartItemModel)
            .where(CartItemModel.user_id == self.user_id, CartItemModel.product_id == product_id)
            .values(quantity=quantity),
            "update",
        )

    def delete(self, product_id: str) -> None:
        self._write(
            delete(CartItemModel).where(
                CartItemModel.user_id == self.user_id,
                CartItemModel.product_id == product_id,
            ),
            "delete",
        )

    def clear(self) -> None:
        self._write(delete(CartItemModel).where(CartItemModel.user_id == self.user_id), "clear")


def select_cart_backend(identity: Identity, db: Session, device_store: DeviceStore) -> CartBackend:
    if identity.is_authenticated:
        return TableCartBackend(db, identity.user_id)
    if not identity.device_id:
        raise ValueError("Guest cart requires a device id")
    return DeviceCartBackend(device_store, identity.device_id)
