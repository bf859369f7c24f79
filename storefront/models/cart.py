"""
Shopping cart model
One cart per user, line items kept as a JSON list on the row
"""

from sqlalchemy import Column, Integer, Numeric, ForeignKey, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from decimal import Decimal
from typing import Any, Dict, List, Optional
import uuid

from .base import Base, TimestampedModel, UUIDModel, JSONType, utcnow

class Cart(Base, TimestampedModel, UUIDModel):
    """
    Per-user shopping cart.

    Each entry in ``items`` looks like::

        {"product": "<uuid>", "quantity": 2, "price": "19.99", "added_at": "<iso>"}

    ``total_items`` and ``total_price`` are derived from ``items`` and are
    recomputed by every mutating method; never write them directly.
    """

    __tablename__ = "carts"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), unique=True, nullable=False, index=True)
    items = Column(JSONType, nullable=False, default=list)
    total_items = Column(Integer, nullable=False, default=0)
    total_price = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    # Relationships
    user = relationship("User", back_populates="cart")

    __table_args__ = (
        CheckConstraint("total_items >= 0", name="check_non_negative_total_items"),
        CheckConstraint("total_price >= 0", name="check_non_negative_total_price"),
    )

    @staticmethod
    def _key(product_id: Any) -> str:
        return str(product_id)

    def find_item(self, product_id: Any) -> Optional[Dict[str, Any]]:
        key = self._key(product_id)
        for item in self.items or []:
            if item["product"] == key:
                return item
        return None

    def add_item(self, product_id: Any, quantity: int = 1, price: Decimal = Decimal("0")) -> None:
        """Add a line, merging into an existing line for the same product"""
        key = self._key(product_id)
        items: List[Dict[str, Any]] = [dict(item) for item in self.items or []]

        for item in items:
            if item["product"] == key:
                item["quantity"] += quantity
                item["price"] = str(price)
                break
        else:
            items.append({
                "product": key,
                "quantity": quantity,
                "price": str(price),
                "added_at": utcnow().isoformat(),
            })

        self.items = items
        self.calculate_totals()

    def update_item_quantity(self, product_id: Any, quantity: int, price: Optional[Decimal] = None) -> None:
        """Set quantity for a line; zero or less removes it"""
        if quantity <= 0:
            self.remove_item(product_id)
            return

        key = self._key(product_id)
        items = [dict(item) for item in self.items or []]
        for item in items:
            if item["product"] == key:
                item["quantity"] = quantity
                if price is not None:
                    item["price"] = str(price)

        self.items = items
        self.calculate_totals()

    def remove_item(self, product_id: Any) -> None:
        key = self._key(product_id)
        self.items = [item for item in self.items or [] if item["product"] != key]
        self.calculate_totals()

    def clear(self) -> None:
        self.items = []
        self.calculate_totals()

    def calculate_totals(self) -> None:
        """Recompute derived totals from the stored price snapshots"""
        total_items = 0
        total_price = Decimal("0")

        for item in self.items or []:
            total_items += item["quantity"]
            total_price += Decimal(str(item.get("price") or "0")) * item["quantity"]

        self.total_items = total_items
        self.total_price = total_price.quantize(Decimal("0.01"))

    @property
    def product_ids(self) -> List[uuid.UUID]:
        return [uuid.UUID(item["product"]) for item in self.items or []]

    @property
    def is_empty(self) -> bool:
        return not self.items
