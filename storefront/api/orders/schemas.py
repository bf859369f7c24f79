"""
Order schemas for request/response validation
"""

from pydantic import ConfigDict, Field, computed_field, model_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
import uuid

from storefront.models.order import OrderStatus, PaymentStatus, PaymentMethodType
from storefront.schemas.base import BaseSchema, Money
from storefront.utils.pagination import PaginationInfo

class AddressInfo(BaseSchema):
    """Schema for address information"""
    name: str = Field(..., min_length=1, max_length=255)
    street: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)

class PaymentMethodInfo(BaseSchema):
    """Payment method tag; any extra fields are passed through unvalidated"""
    model_config = ConfigDict(extra="allow")

    type: PaymentMethodType

class OrderCreate(BaseSchema):
    """Schema for creating order from the caller's cart"""
    shipping_address: AddressInfo
    billing_address: Optional[AddressInfo] = None
    payment_method: PaymentMethodInfo
    notes: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def default_billing_address(self):
        if self.billing_address is None:
            self.billing_address = self.shipping_address
        return self

class OrderItemSnapshot(BaseSchema):
    """Line item as captured at checkout"""
    product: str
    name: str
    price: Money
    quantity: int
    image: str = ""

class TimelineEntry(BaseSchema):
    id: str
    status: OrderStatus
    note: str
    actor: str
    timestamp: datetime

    model_config = ConfigDict(use_enum_values=True)

class CurrentStatus(BaseSchema):
    status: OrderStatus
    payment_status: PaymentStatus
    tracking_number: Optional[str] = None
    last_update: Optional[datetime] = None

    model_config = ConfigDict(use_enum_values=True)

class OrderResponse(BaseSchema):
    """Schema for order response"""
    id: uuid.UUID
    order_number: str
    items: List[OrderItemSnapshot]

    # Addresses
    shipping_address: Dict[str, Any]
    billing_address: Optional[Dict[str, Any]] = None

    # Payment / status
    payment_method: Dict[str, Any]
    payment_status: PaymentStatus
    status: OrderStatus

    # Amounts
    subtotal: Money
    tax: Money
    shipping: Money
    discount: Money
    total: Money
    currency: str

    tracking_number: Optional[str] = None
    notes: Optional[str] = None
    timeline: List[TimelineEntry] = []
    created_at: datetime
    updated_at: datetime

    # Eligibility, filled in by the service
    can_cancel: bool = False
    can_return: bool = False

    model_config = ConfigDict(use_enum_values=True)

    @computed_field
    @property
    def item_count(self) -> int:
        return len(self.items)

class OrderListResponse(BaseSchema):
    """Schema for paginated order list"""
    orders: List[OrderResponse]
    pagination: PaginationInfo

class OrderEnvelope(BaseSchema):
    message: str
    order: OrderResponse

class OrderCancelRequest(BaseSchema):
    """Request to cancel order"""
    reason: Optional[str] = Field(None, max_length=500)

class OrderReturnRequest(BaseSchema):
    """Request to return order"""
    reason: str = Field(..., min_length=1, max_length=500)
    items: List[str]

class OrderStatusUpdate(BaseSchema):
    """Admin status update"""
    status: OrderStatus
    note: Optional[str] = Field(None, max_length=200)
    tracking_number: Optional[str] = Field(None, max_length=100)
    payment_status: Optional[PaymentStatus] = None

class OrderTimelineResponse(BaseSchema):
    order_id: uuid.UUID
    order_number: str
    current_status: CurrentStatus
    timeline: List[TimelineEntry]
    can_cancel: bool
    can_return: bool

class OrderTrackingResponse(BaseSchema):
    """Public tracking information"""
    order_number: str
    status: OrderStatus
    payment_status: PaymentStatus
    tracking_number: Optional[str] = None
    current_status: CurrentStatus
    timeline: List[TimelineEntry]
    estimated_delivery: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(use_enum_values=True)

class RecentOrder(BaseSchema):
    id: uuid.UUID
    order_number: str
    status: OrderStatus
    total: Money
    created_at: datetime

    model_config = ConfigDict(use_enum_values=True)

class OrderStats(BaseSchema):
    total_orders: int
    pending_orders: int
    processing_orders: int
    shipped_orders: int
    delivered_orders: int
    cancelled_orders: int
    returned_orders: int
    total_spent: Money

class OrderSummaryResponse(BaseSchema):
    """Order history summary for the current user"""
    summary: OrderStats
    recent_orders: List[RecentOrder]
