# storefront/domain/schemas.py
from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.domain.order_status import OrderStatus

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"


class Notice(BaseModel):
    """User-facing confirmation or non-fatal error attached to a response."""

    level: Literal["success", "error", "info"]
    title: str
    message: str

    @classmethod
    def success(cls, title: str, message: str) -> "Notice":
        return cls(level="success", title=title, message=message)

    @classmethod
    def error(cls, message: str, title: str = "Error") -> "Notice":
        return cls(level="error", title=title, message=message)


class ProductIn(BaseModel):
    """Product snapshot sent by the client when saving to cart or wishlist."""

    product_id: str = Field(..., min_length=1, description="Product identifier")
    product_name: str = Field(..., min_length=1)
    product_price: int = Field(..., ge=0, description="Price in minor currency units")
    product_image: str = ""


class CartItemIn(ProductIn):
    """Schema for adding a product to the cart."""

    quantity: int = Field(1, ge=1, description="Quantity to add (must be >= 1)")


class QuantityIn(BaseModel):
    # <= 0 removes the line
    quantity: int


class CartLine(ProductIn):
    quantity: int = Field(..., ge=1)


class WishlistEntry(ProductIn):
    pass


class CartOut(BaseModel):
    items: List[CartLine]
    total: int
    count: int
    notice: Optional[Notice] = None


class AddOutcome(str, Enum):
    ADDED = "added"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"


class WishlistOut(BaseModel):
    items: List[WishlistEntry]
    count: int
    outcome: Optional[AddOutcome] = None
    notice: Optional[Notice] = None


class WishlistContainsOut(BaseModel):
    product_id: str
    in_wishlist: bool


class SessionOut(BaseModel):
    cart: CartOut
    wishlist: WishlistOut
    merged: bool


class ShippingAddress(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address: str = ""
    city: str = ""
    zip_code: str = Field("", alias="zipCode")


class OrderCreate(BaseModel):
    """Schema for placing a single-product order."""

    product_id: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    product_price: int = Field(..., gt=0, description="Price in minor currency units")
    quantity: int = Field(1, ge=1)
    customer_email: str = Field(..., pattern=EMAIL_PATTERN)
    customer_name: Optional[str] = None
    shipping_address: Optional[ShippingAddress] = None


class CheckoutIn(BaseModel):
    """Schema for turning the current cart into orders."""

    customer_email: str = Field(..., pattern=EMAIL_PATTERN)
    customer_name: Optional[str] = None
    shipping_address: Optional[ShippingAddress] = None


class OrderOut(BaseModel):
    id: UUID
    user_id: Optional[UUID] = None
    product_id: str
    product_name: str
    product_price: int
    quantity: int
    total_amount: int
    customer_email: str
    customer_name: Optional[str] = None
    shipping_address: Optional[dict] = None
    status: OrderStatus
    payment_reference: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderCreatedOut(BaseModel):
    success: bool = True
    order_id: UUID
    message: str
    order: OrderOut


class CheckoutOut(BaseModel):
    success: bool = True
    order_ids: List[UUID]
    total_amount: int
    orders: List[OrderOut]
    notice: Optional[Notice] = None


class TimelineStep(BaseModel):
    key: str
    label: str
    description: str
    completed: bool
    current: bool


class OrderTrackingOut(BaseModel):
    order: OrderOut
    status_label: str
    status_color: str
    progress: float
    timeline: List[TimelineStep]


class StatusChangeIn(BaseModel):
    status: OrderStatus


class AdminStatsOut(BaseModel):
    total_orders: int
    total_revenue: int
    pending_orders: int
    completed_orders: int


class PaymentIn(BaseModel):
    """Schema for paying a pending order."""

    order_id: UUID
    amount: int = Field(..., gt=0)
    customer_email: str = Field(..., pattern=EMAIL_PATTERN)
    customer_name: Optional[str] = None
    product_name: str = ""


class PaymentOut(BaseModel):
    success: bool = True
    payment_id: str
    order_id: UUID
    message: str
    redirect_url: str
