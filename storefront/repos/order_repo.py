# storefront/repos/order_repo.py
from typing import List
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import PersistenceError
from storefront.domain.order_status import OrderStatus


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self, what: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to {what}") from e

    def create_order(self, order: OrderModel) -> OrderModel:
        return self.create_orders([order])[0]

    def create_orders(self, orders: List[OrderModel]) -> List[OrderModel]:
        # single commit, either all orders land or none
        self.db.add_all(orders)
        self._commit("create order")
        for order in orders:
            self.db.refresh(order)
        return orders

    def get_order(self, order_id: UUID) -> OrderModel | None:
        try:
            return self.db.get(OrderModel, order_id)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to fetch order") from e

    def update_order_status(
        self,
        order: OrderModel,
        status: OrderStatus,
        payment_reference: str | None = None,
    ) -> OrderModel:
        order.status = status
        if payment_reference is not None:
            order.payment_reference = payment_reference
        self._commit("update order status")
        self.db.refresh(order)
        return order

    def list_orders(
        self,
        user_id: UUID | None = None,
        email: str | None = None,
        status: OrderStatus | None = None,
    ) -> List[OrderModel]:
        stmt = select(OrderModel).order_by(OrderModel.created_at.desc())

        owner = []
        if user_id is not None:
            owner.append(OrderModel.user_id == user_id)
        if email:
            owner.append(OrderModel.customer_email == email)
        if owner:
            stmt = stmt.where(or_(*owner))
        if status is not None:
            stmt = stmt.where(OrderModel.status == status)

        try:
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to fetch orders") from e

    def stats(self) -> dict:
        try:
            total_orders, total_revenue = self.db.execute(
                select(func.count(OrderModel.id), func.coalesce(func.sum(OrderModel.total_amount), 0))
            ).one()
            by_status = dict(
                self.db.execute(
                    select(OrderModel.status, func.count(OrderModel.id)).group_by(OrderModel.status)
                ).all()
            )
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to compute order stats") from e

        return {
            "total_orders": total_orders,
            "total_revenue": int(total_revenue),
            "pending_orders": by_status.get(OrderStatus.PENDING, 0),
            "completed_orders": by_status.get(OrderStatus.COMPLETED, 0),
        }
