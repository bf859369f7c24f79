"""Product model: price and stock source for carts and checkout"""

from sqlalchemy import Column, String, Text, Numeric, Integer, Boolean, CheckConstraint, Index

from .base import Base, TimestampedModel, UUIDModel, JSONType

class Product(Base, TimestampedModel, UUIDModel):
    """Catalog product"""

    __tablename__ = "products"

    # Basic info
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")

    # Pricing
    price = Column(Numeric(10, 2), nullable=False)

    # Inventory
    stock = Column(Integer, default=0, nullable=False)

    # Media: [{"url": ..., "alt": ...}]
    images = Column(JSONType, nullable=False, default=list)

    is_active = Column(Boolean, default=True, nullable=False)

    # Constraints
    __table_args__ = (
        CheckConstraint("price >= 0", name="check_non_negative_price"),
        CheckConstraint("stock >= 0", name="check_non_negative_stock"),
        Index("idx_products_active", "is_active"),
    )

    @property
    def primary_image(self) -> str:
        """URL of the first image, or empty string"""
        if self.images:
            first = self.images[0]
            if isinstance(first, dict):
                return first.get("url", "")
            return str(first)
        return ""
