# storefront/data/models/cart_item.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Uuid, UniqueConstraint

from storefront.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(Uuid, nullable=False, index=True)
    product_id = Column(String(64), nullable=False)

    product_name = Column(String(255), nullable=False)
    product_price = Column(Integer, nullable=False)
    product_image = Column(String(1024), nullable=False, default="")
    quantity = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (UniqueConstraint("user_id", "product_id", name="u_cart_user_product"),)
