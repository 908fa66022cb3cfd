# storefront/data/models/wishlist_item.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Uuid, UniqueConstraint

from storefront.data.database import Base


class WishlistItemModel(Base):
    __tablename__ = "wishlist_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(Uuid, nullable=False, index=True)
    product_id = Column(String(64), nullable=False)

    product_name = Column(String(255), nullable=False)
    product_price = Column(Integer, nullable=False)
    product_image = Column(String(1024), nullable=False, default="")

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (UniqueConstraint("user_id", "product_id", name="u_wishlist_user_product"),)
