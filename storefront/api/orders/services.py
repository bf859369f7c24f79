"""
Order service layer
Handles checkout, status transitions and order reads
"""

from typing import List, Optional, Dict, Any, Tuple
from datetime import datetime, timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
import logging
import secrets
import string
import time
import uuid

from storefront.models import (
    Order, OrderStatus, PaymentStatus, Product, Actor
)
from storefront.core.config import settings
from storefront.core.exceptions import (
    EmptyCartException,
    ProductUnavailableException,
    InsufficientStockException,
    OrderNotFoundException,
)
from storefront.api.cart.services import CartService
from storefront.utils.pagination import paginate
from .pricing import calculate_totals, line_subtotal, to_money
from .schemas import OrderCreate, OrderStatusUpdate
from .state_machine import OrderStateMachine, order_state_machine

logger = logging.getLogger(__name__)

ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits

def generate_order_number() -> str:
    """
    Generate a unique order number: ORD-<epoch millis>-<random suffix>

    The suffix comes from a CSPRNG, so two orders created in the same
    millisecond still differ; the unique column is the final backstop.
    """
    millis = int(time.time() * 1000)
    suffix = ''.join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(6))
    return f"ORD-{millis}-{suffix}"

def _parse_uuid(value: Any) -> Optional[uuid.UUID]:
    try:
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
    except ValueError:
        return None

class OrderService:
    """Order service for business logic"""

    def __init__(self, db: AsyncSession, state_machine: Optional[OrderStateMachine] = None):
        self.db = db
        self.cart_service = CartService(db)
        self.state_machine = state_machine or order_state_machine

    def annotate(self, order: Order) -> Order:
        """Attach customer eligibility flags for the response"""
        order.can_cancel = self.state_machine.is_cancellable(order)
        order.can_return = self.state_machine.is_returnable(order)
        return order

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    async def create_order(self, user_id: uuid.UUID, data: OrderCreate) -> Order:
        """
        Create new order from the user's cart

        Stock is reserved with a conditional decrement, and the order insert,
        stock updates and cart clearing commit together or not at all.

        Raises:
            EmptyCartException: If the cart is missing or empty
            ProductUnavailableException: If a product is gone or inactive
            InsufficientStockException: If stock can't cover a line
        """
        cart = await self.cart_service.get_cart(user_id)
        if cart is None or cart.is_empty:
            raise EmptyCartException()

        products = await self.cart_service.get_products(cart.product_ids)

        # Validate products and build the snapshot
        lines: List[Tuple[Product, int]] = []
        for cart_item in cart.items:
            product = products.get(uuid.UUID(cart_item["product"]))

            if product is None or not product.is_active:
                raise ProductUnavailableException(product.name if product else None)

            if product.stock < cart_item["quantity"]:
                raise InsufficientStockException(product.name, product.stock)

            lines.append((product, cart_item["quantity"]))

        totals = calculate_totals(
            line_subtotal((product.price, quantity) for product, quantity in lines)
        )

        order = Order(
            user_id=user_id,
            order_number=generate_order_number(),
            items=[
                {
                    "product": str(product.id),
                    "name": product.name,
                    "price": str(to_money(product.price)),
                    "quantity": quantity,
                    "image": product.primary_image,
                }
                for product, quantity in lines
            ],
            shipping_address=data.shipping_address.model_dump(by_alias=True),
            billing_address=data.billing_address.model_dump(by_alias=True),
            payment_method=data.payment_method.model_dump(mode="json", by_alias=True),
            payment_status=PaymentStatus.PENDING,
            status=OrderStatus.PENDING,
            subtotal=totals.subtotal,
            shipping=totals.shipping,
            tax=totals.tax,
            discount=totals.discount,
            total=totals.total,
            currency=settings.DEFAULT_CURRENCY,
            notes=data.notes,
            timeline=[],
        )
        order.record_status(OrderStatus.PENDING, "Order placed", Actor.CUSTOMER)

        try:
            self.db.add(order)
            for product, quantity in lines:
                await self._reserve_stock(product, quantity)
            cart.clear()
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(order)
        logger.info(
            "Order created",
            extra={"order_number": order.order_number, "user_id": user_id}
        )
        return self.annotate(order)

    async def _reserve_stock(self, product: Product, quantity: int) -> None:
        """Decrement stock only if enough remains; anything else is an oversell"""
        result = await self.db.execute(
            update(Product)
            .where(Product.id == product.id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            current = await self.db.scalar(select(Product.stock).where(Product.id == product.id))
            raise InsufficientStockException(product.name, current or 0)

    async def _restore_stock(self, order: Order) -> None:
        for item in order.items or []:
            product_id = _parse_uuid(item.get("product"))
            if product_id is None:
                continue
            result = await self.db.execute(
                update(Product)
                .where(Product.id == product_id)
                .values(stock=Product.stock + item["quantity"])
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                logger.warning(
                    "Product %s missing while restoring stock",
                    product_id,
                    extra={"order_number": order.order_number}
                )

    async def _apply_stock_effects(self, order: Order, previous: OrderStatus) -> None:
        """Put stock back when an order newly enters cancelled (or returned, if configured)"""
        current = OrderStatus(order.status)
        if current == previous:
            return
        if current == OrderStatus.CANCELLED:
            await self._restore_stock(order)
        elif current == OrderStatus.RETURNED and settings.RESTOCK_ON_RETURN:
            await self._restore_stock(order)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_order(
        self,
        order_id: Any,
        user_id: Optional[uuid.UUID] = None
    ) -> Order:
        """
        Get order, optionally scoped to its owner

        Raises:
            OrderNotFoundException: If missing or owned by someone else
        """
        order_uuid = _parse_uuid(order_id)
        if order_uuid is None:
            raise OrderNotFoundException()

        query = select(Order).where(Order.id == order_uuid)
        if user_id is not None:
            query = query.where(Order.user_id == user_id)

        result = await self.db.execute(query)
        order = result.scalar_one_or_none()

        if not order:
            raise OrderNotFoundException()

        return self.annotate(order)

    async def list_orders(
        self,
        user_id: Optional[uuid.UUID] = None,
        status: Optional[OrderStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        page: int = 1,
        size: int = 10
    ) -> Dict[str, Any]:
        """
        List orders, newest first

        Args:
            user_id: Owner filter; None lists every order (admin)
            status: Optional status filter
            payment_status: Optional payment status filter
            page: Page number
            size: Page size
        """
        query = select(Order)

        if user_id is not None:
            query = query.where(Order.user_id == user_id)
        if status:
            query = query.where(Order.status == status)
        if payment_status:
            query = query.where(Order.payment_status == payment_status)

        query = query.order_by(Order.created_at.desc(), Order.order_number.desc())

        result = await paginate(self.db, query, page=page, size=size)
        result["items"] = [self.annotate(order) for order in result["items"]]
        return result

    async def get_order_tracking(self, order_number: str) -> Dict[str, Any]:
        """
        Public tracking by order number

        Raises:
            OrderNotFoundException: If no order has that number
        """
        result = await self.db.execute(
            select(Order).where(Order.order_number == order_number)
        )
        order = result.scalar_one_or_none()

        if not order:
            raise OrderNotFoundException()

        return {
            "order_number": order.order_number,
            "status": order.status,
            "payment_status": order.payment_status,
            "tracking_number": order.tracking_number,
            "current_status": order.current_status,
            "timeline": order.status_history,
            "estimated_delivery": self.estimate_delivery(order),
            "created_at": order.created_at,
            "updated_at": order.updated_at,
        }

    def estimate_delivery(self, order: Order) -> Optional[datetime]:
        """Ship time plus the configured transit days, only while shipped"""
        if OrderStatus(order.status) != OrderStatus.SHIPPED:
            return None

        entry = order.last_entry_for(OrderStatus.SHIPPED)
        shipped_at = datetime.fromisoformat(entry["timestamp"]) if entry else order.updated_at
        return shipped_at + timedelta(days=settings.SHIPPING_ESTIMATE_DAYS)

    async def get_order_summary(self, user_id: uuid.UUID) -> Dict[str, Any]:
        """Per-status counts, total paid spend and the latest orders"""
        result = await self.db.execute(
            select(Order.status, func.count(Order.id))
            .where(Order.user_id == user_id)
            .group_by(Order.status)
        )
        counts = {OrderStatus(status): count for status, count in result.all()}

        total_spent = await self.db.scalar(
            select(func.coalesce(func.sum(Order.total), 0))
            .where(Order.user_id == user_id, Order.payment_status == PaymentStatus.PAID)
        )

        recent = await self.db.execute(
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.order_number.desc())
            .limit(5)
        )

        return {
            "summary": {
                "total_orders": sum(counts.values()),
                "pending_orders": counts.get(OrderStatus.PENDING, 0),
                "processing_orders": counts.get(OrderStatus.PROCESSING, 0),
                "shipped_orders": counts.get(OrderStatus.SHIPPED, 0),
                "delivered_orders": counts.get(OrderStatus.DELIVERED, 0),
                "cancelled_orders": counts.get(OrderStatus.CANCELLED, 0),
                "returned_orders": counts.get(OrderStatus.RETURNED, 0),
                "total_spent": to_money(total_spent or 0),
            },
            "recent_orders": recent.scalars().all(),
        }

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def cancel_order(
        self,
        order_id: Any,
        user_id: uuid.UUID,
        reason: Optional[str] = None
    ) -> Order:
        """
        Customer cancellation; restores stock for every line

        Raises:
            OrderNotFoundException: If not found or not owned
            TransitionNotAllowedException: If not pending or processing
        """
        order = await self.get_order(order_id, user_id)

        previous, _ = self.state_machine.apply(
            order,
            OrderStatus.CANCELLED,
            Actor.CUSTOMER,
            note=reason or "Order cancelled by customer",
            error_message="Order cannot be cancelled in current status"
        )
        await self._apply_stock_effects(order, previous)
        await self._save(order)

        logger.info("Order cancelled by customer", extra={"order_number": order.order_number})
        return self.annotate(order)

    async def request_return(
        self,
        order_id: Any,
        user_id: uuid.UUID,
        reason: str,
        items: List[str]
    ) -> Order:
        """
        Customer return request on a delivered, paid order

        Raises:
            OrderNotFoundException: If not found or not owned
            TransitionNotAllowedException: If not returnable
        """
        order = await self.get_order(order_id, user_id)

        previous, _ = self.state_machine.apply(
            order,
            OrderStatus.RETURNED,
            Actor.CUSTOMER,
            note=f"Return requested: {reason}",
            error_message="Order cannot be returned in current status"
        )
        await self._apply_stock_effects(order, previous)
        await self._save(order)

        logger.info(
            "Return requested for %d item(s)",
            len(items),
            extra={"order_number": order.order_number}
        )
        return self.annotate(order)

    async def update_order_status(self, order_id: Any, data: OrderStatusUpdate) -> Order:
        """
        Admin status update, with optional payment status and tracking number

        Raises:
            OrderNotFoundException: If order not found
            TransitionNotAllowedException: If the admin table forbids the move
        """
        order = await self.get_order(order_id)

        previous, _ = self.state_machine.apply(
            order,
            data.status,
            Actor.ADMIN,
            note=data.note
        )

        if data.tracking_number:
            order.tracking_number = data.tracking_number
        if data.payment_status:
            order.payment_status = data.payment_status

        await self._apply_stock_effects(order, previous)
        await self._save(order)

        logger.info(
            "Order status %s -> %s by admin",
            previous.value,
            OrderStatus(order.status).value,
            extra={"order_number": order.order_number}
        )
        return self.annotate(order)

    async def _save(self, order: Order) -> None:
        try:
            self.db.add(order)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(order)
