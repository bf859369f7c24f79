"""Order model with embedded status timeline"""

from sqlalchemy import Column, String, Numeric, Enum, ForeignKey, Index, Text, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from decimal import Decimal
from typing import Any, Dict, List, Optional
import enum
import uuid

from .base import Base, TimestampedModel, UUIDModel, JSONType, utcnow

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"

class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"

class PaymentMethodType(str, enum.Enum):
    CARD = "card"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"
    CASH_ON_DELIVERY = "cash_on_delivery"

class Actor(str, enum.Enum):
    """Who triggered a status change"""
    CUSTOMER = "customer"
    ADMIN = "admin"
    SYSTEM = "system"

STATUS_MESSAGES = {
    OrderStatus.PENDING: "Order received and is being processed",
    OrderStatus.PROCESSING: "Order is being prepared for shipment",
    OrderStatus.SHIPPED: "Order has been shipped",
    OrderStatus.DELIVERED: "Order has been delivered",
    OrderStatus.CANCELLED: "Order has been cancelled",
    OrderStatus.RETURNED: "Order has been returned",
}

def _enum_values(enum_cls):
    return [member.value for member in enum_cls]

class Order(Base, TimestampedModel, UUIDModel):
    """
    A completed checkout.

    Line items, addresses and amounts are a snapshot taken at checkout and are
    never recomputed. Only ``status``, ``payment_status``, ``tracking_number``
    and the append-only ``timeline`` change afterwards.
    """

    __tablename__ = "orders"

    # Order identification
    order_number = Column(String(50), unique=True, nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)

    # Snapshot: [{"product", "name", "price", "quantity", "image"}]
    items = Column(JSONType, nullable=False, default=list)

    # Addresses
    shipping_address = Column(JSONType, nullable=False)
    billing_address = Column(JSONType, nullable=True)

    # Payment
    payment_method = Column(JSONType, nullable=False)
    payment_status = Column(
        Enum(PaymentStatus, name="payment_status", values_callable=_enum_values),
        default=PaymentStatus.PENDING,
        nullable=False
    )

    # Status
    status = Column(
        Enum(OrderStatus, name="order_status", values_callable=_enum_values),
        default=OrderStatus.PENDING,
        nullable=False
    )

    # Amounts
    subtotal = Column(Numeric(10, 2), nullable=False)
    tax = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    shipping = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    discount = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    total = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")

    # Delivery
    tracking_number = Column(String(100), nullable=True)

    # Additional info
    notes = Column(Text, nullable=True)
    timeline = Column(JSONType, nullable=False, default=list)

    # Relationships
    user = relationship("User", back_populates="orders")

    # Indexes
    __table_args__ = (
        CheckConstraint("subtotal >= 0", name="check_non_negative_subtotal"),
        CheckConstraint("total >= 0", name="check_non_negative_total"),
        Index("idx_orders_user_created", "user_id", "created_at"),
        Index("idx_orders_status", "status"),
        Index("idx_orders_payment_status", "payment_status"),
    )

    def record_status(
        self,
        new_status: OrderStatus,
        note: Optional[str] = None,
        actor: Actor = Actor.SYSTEM
    ) -> Dict[str, Any]:
        """
        Set the current status and append the matching timeline entry.

        This is the only place ``status`` is written after creation, so the
        status and the last timeline entry never disagree.
        """
        new_status = OrderStatus(new_status)
        entry = {
            "id": uuid.uuid4().hex,
            "status": new_status.value,
            "note": note or STATUS_MESSAGES.get(new_status, f"Status changed to {new_status.value}"),
            "actor": Actor(actor).value,
            "timestamp": utcnow().isoformat(),
        }
        # Reassign so the JSON column is flagged dirty
        self.timeline = [*(self.timeline or []), entry]
        self.status = new_status
        return entry

    @property
    def status_history(self) -> List[Dict[str, Any]]:
        return list(self.timeline or [])

    def last_entry_for(self, status: OrderStatus) -> Optional[Dict[str, Any]]:
        """Most recent timeline entry recorded for ``status``"""
        for entry in reversed(self.timeline or []):
            if entry.get("status") == OrderStatus(status).value:
                return entry
        return None

    @property
    def current_status(self) -> Dict[str, Any]:
        timeline = self.timeline or []
        return {
            "status": self.status,
            "payment_status": self.payment_status,
            "tracking_number": self.tracking_number,
            "last_update": timeline[-1]["timestamp"] if timeline else self.updated_at,
        }
