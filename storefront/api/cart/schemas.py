"""
Cart schemas for request/response validation
"""

from pydantic import Field
from typing import Optional, List, Dict, Any
from datetime import datetime
import uuid

from storefront.core.config import settings
from storefront.schemas.base import BaseSchema, Money

class CartItemAdd(BaseSchema):
    """Schema for adding item to cart"""
    product_id: uuid.UUID
    quantity: int = Field(1, ge=1, le=settings.MAX_CART_QUANTITY)

class CartItemUpdate(BaseSchema):
    """Schema for updating cart item; zero removes the line"""
    product_id: uuid.UUID
    quantity: int = Field(..., ge=0, le=settings.MAX_CART_QUANTITY)

class CartItemRemove(BaseSchema):
    product_id: uuid.UUID

class CartProduct(BaseSchema):
    """Live product details shown next to a cart line"""
    id: uuid.UUID
    name: str
    price: Money
    images: List[Dict[str, Any]] = []
    stock: int
    is_active: bool

class CartLine(BaseSchema):
    product: CartProduct
    quantity: int
    price: Money
    added_at: Optional[datetime] = None

class CartResponse(BaseSchema):
    """Schema for complete cart response"""
    id: uuid.UUID
    user_id: uuid.UUID
    items: List[CartLine]
    total_items: int
    total_price: Money
    created_at: datetime
    updated_at: datetime

class CartEnvelope(BaseSchema):
    message: Optional[str] = None
    cart: CartResponse

class CartCountResponse(BaseSchema):
    count: int
