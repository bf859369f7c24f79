"""
Cart service layer
Handles shopping cart business logic
"""

from typing import Dict, List, Optional
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
import uuid

from storefront.models import Cart, Product
from storefront.core.exceptions import NotFoundException, InsufficientStockException
from .schemas import CartResponse, CartLine, CartProduct

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE = {"url": "/api/placeholder/100/100", "alt": "Product not found"}

class CartService:
    """Shopping cart service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_cart(self, user_id: uuid.UUID) -> Optional[Cart]:
        """Fetch the user's cart without creating one"""
        result = await self.db.execute(
            select(Cart).where(Cart.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create_cart(self, user_id: uuid.UUID) -> Cart:
        """Carts are created lazily on first access"""
        cart = await self.get_cart(user_id)
        if cart is None:
            cart = Cart(
                user_id=user_id,
                items=[],
                total_items=0,
                total_price=Decimal("0.00")
            )
            self.db.add(cart)
            await self.db.commit()
            await self.db.refresh(cart)
            logger.info("Created cart for user %s", user_id)
        return cart

    async def _require_cart(self, user_id: uuid.UUID) -> Cart:
        cart = await self.get_cart(user_id)
        if cart is None:
            raise NotFoundException("Cart not found")
        return cart

    async def get_products(self, product_ids: List[uuid.UUID]) -> Dict[uuid.UUID, Product]:
        if not product_ids:
            return {}
        result = await self.db.execute(
            select(Product).where(Product.id.in_(product_ids))
        )
        return {product.id: product for product in result.scalars().all()}

    async def build_response(self, cart: Cart) -> CartResponse:
        """
        Expand cart lines with live product details.

        Lines whose product has vanished or been deactivated are kept and shown
        with a placeholder so the shopper can see and remove them.
        """
        products = await self.get_products(cart.product_ids)

        lines = []
        for item in cart.items or []:
            product_id = uuid.UUID(item["product"])
            product = products.get(product_id)

            if product is not None and product.is_active:
                product_info = CartProduct.model_validate(product)
            else:
                product_info = CartProduct(
                    id=product_id,
                    name="Product not found",
                    price=Decimal(str(item.get("price") or "0")),
                    images=[PLACEHOLDER_IMAGE],
                    stock=0,
                    is_active=False
                )

            lines.append(CartLine(
                product=product_info,
                quantity=item["quantity"],
                price=Decimal(str(item.get("price") or "0")),
                added_at=item.get("added_at")
            ))

        return CartResponse(
            id=cart.id,
            user_id=cart.user_id,
            items=lines,
            total_items=cart.total_items,
            total_price=cart.total_price,
            created_at=cart.created_at,
            updated_at=cart.updated_at
        )

    async def _get_active_product(self, product_id: uuid.UUID) -> Product:
        product = await self.db.get(Product, product_id)
        if product is None or not product.is_active:
            raise NotFoundException("Product not found or not available")
        return product

    async def add_to_cart(
        self,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int
    ) -> Cart:
        """
        Add item to cart, merging with an existing line

        Raises:
            NotFoundException: If product not found or inactive
            InsufficientStockException: If not enough stock for the merged quantity
        """
        product = await self._get_active_product(product_id)
        cart = await self.get_or_create_cart(user_id)

        existing = cart.find_item(product_id)
        new_quantity = quantity + (existing["quantity"] if existing else 0)
        if product.stock < new_quantity:
            raise InsufficientStockException(product.name, product.stock)

        cart.add_item(product_id, quantity, product.price)

        await self.db.commit()
        await self.db.refresh(cart)
        return cart

    async def update_cart_item(
        self,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int
    ) -> Cart:
        """
        Update cart item quantity; zero removes the line

        Raises:
            NotFoundException: If cart, line or product not found
            InsufficientStockException: If not enough stock
        """
        cart = await self._require_cart(user_id)

        if cart.find_item(product_id) is None:
            raise NotFoundException("Product not found in cart")

        if quantity == 0:
            cart.remove_item(product_id)
        else:
            product = await self._get_active_product(product_id)
            if product.stock < quantity:
                raise InsufficientStockException(product.name, product.stock)
            cart.update_item_quantity(product_id, quantity, product.price)

        await self.db.commit()
        await self.db.refresh(cart)
        return cart

    async def remove_from_cart(self, user_id: uuid.UUID, product_id: uuid.UUID) -> Cart:
        cart = await self._require_cart(user_id)
        cart.remove_item(product_id)

        await self.db.commit()
        await self.db.refresh(cart)
        return cart

    async def clear_cart(self, user_id: uuid.UUID) -> Cart:
        cart = await self._require_cart(user_id)
        cart.clear()

        await self.db.commit()
        await self.db.refresh(cart)
        return cart

    async def count_items(self, user_id: uuid.UUID) -> int:
        cart = await self.get_cart(user_id)
        return cart.total_items if cart else 0
