"""
Order API routes
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import logging

from storefront.core.config import settings
from storefront.core.database import get_db
from storefront.core.security import get_current_user, require_admin
from storefront.models.order import OrderStatus, PaymentStatus
from .schemas import (
    OrderCreate,
    OrderResponse,
    OrderListResponse,
    OrderEnvelope,
    OrderCancelRequest,
    OrderReturnRequest,
    OrderStatusUpdate,
    OrderTimelineResponse,
    OrderTrackingResponse,
    OrderSummaryResponse
)
from .services import OrderService

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post(
    "",
    response_model=OrderEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
    description="Check out the caller's cart into a new order"
)
async def create_order(
    order_data: OrderCreate,
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Create new order"""
    service = OrderService(db)
    order = await service.create_order(user_id=current_user.id, data=order_data)
    return OrderEnvelope(
        message="Order created successfully",
        order=OrderResponse.model_validate(order)
    )

@router.get(
    "",
    response_model=OrderListResponse,
    summary="List orders",
    description="Get paginated list of the caller's orders"
)
async def list_orders(
    status: Optional[OrderStatus] = None,
    payment_status: Optional[PaymentStatus] = Query(None, alias="paymentStatus"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List user orders"""
    service = OrderService(db)
    result = await service.list_orders(
        user_id=current_user.id,
        status=status,
        payment_status=payment_status,
        page=page,
        size=limit
    )
    return OrderListResponse(
        orders=[OrderResponse.model_validate(order) for order in result["items"]],
        pagination=result["pagination"]
    )

@router.get(
    "/history/summary",
    response_model=OrderSummaryResponse,
    summary="Get order summary",
    description="Order counts per status, total spent and recent orders"
)
async def get_order_summary(
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    summary = await service.get_order_summary(current_user.id)
    return OrderSummaryResponse.model_validate(summary)

@router.get(
    "/track/{order_number}",
    response_model=OrderTrackingResponse,
    summary="Track order",
    description="Public order tracking by order number"
)
async def track_order(
    order_number: str,
    db: AsyncSession = Depends(get_db)
):
    """No authentication; only non-sensitive fields are returned"""
    service = OrderService(db)
    tracking = await service.get_order_tracking(order_number)
    return OrderTrackingResponse.model_validate(tracking)

@router.get(
    "/admin/all",
    response_model=OrderListResponse,
    summary="List all orders",
    description="Admin view of every order"
)
async def list_all_orders(
    status: Optional[OrderStatus] = None,
    payment_status: Optional[PaymentStatus] = Query(None, alias="paymentStatus"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.ADMIN_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current_user=Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    result = await service.list_orders(
        status=status,
        payment_status=payment_status,
        page=page,
        size=limit
    )
    return OrderListResponse(
        orders=[OrderResponse.model_validate(order) for order in result["items"]],
        pagination=result["pagination"]
    )

@router.get(
    "/{order_id}",
    response_model=OrderEnvelope,
    summary="Get order",
    description="Get order details by ID"
)
async def get_order(
    order_id: str,
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get order details"""
    service = OrderService(db)
    order = await service.get_order(order_id, current_user.id)
    return OrderEnvelope(
        message="Order retrieved successfully",
        order=OrderResponse.model_validate(order)
    )

@router.get(
    "/{order_id}/timeline",
    response_model=OrderTimelineResponse,
    summary="Get order timeline",
    description="Status history with current eligibility"
)
async def get_order_timeline(
    order_id: str,
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    order = await service.get_order(order_id, current_user.id)
    return OrderTimelineResponse(
        order_id=order.id,
        order_number=order.order_number,
        current_status=order.current_status,
        timeline=order.status_history,
        can_cancel=order.can_cancel,
        can_return=order.can_return
    )

@router.put(
    "/{order_id}/cancel",
    response_model=OrderEnvelope,
    summary="Cancel order",
    description="Cancel a pending or processing order"
)
async def cancel_order(
    order_id: str,
    cancel_data: Optional[OrderCancelRequest] = None,
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Cancel order and put its stock back"""
    service = OrderService(db)
    order = await service.cancel_order(
        order_id=order_id,
        user_id=current_user.id,
        reason=cancel_data.reason if cancel_data else None
    )
    return OrderEnvelope(
        message="Order cancelled successfully",
        order=OrderResponse.model_validate(order)
    )

@router.put(
    "/{order_id}/return",
    response_model=OrderEnvelope,
    summary="Request return",
    description="Request a return for a delivered, paid order"
)
async def request_return(
    order_id: str,
    return_data: OrderReturnRequest,
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    order = await service.request_return(
        order_id=order_id,
        user_id=current_user.id,
        reason=return_data.reason,
        items=return_data.items
    )
    return OrderEnvelope(
        message="Return request submitted successfully",
        order=OrderResponse.model_validate(order)
    )

@router.put(
    "/{order_id}/status",
    response_model=OrderEnvelope,
    summary="Update order status",
    description="Admin status change with optional tracking number and payment status"
)
async def update_order_status(
    order_id: str,
    update_data: OrderStatusUpdate,
    current_user=Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    order = await service.update_order_status(order_id, update_data)
    logger.info(
        "Admin %s updated order status",
        current_user.id,
        extra={"order_number": order.order_number}
    )
    return OrderEnvelope(
        message="Order status updated successfully",
        order=OrderResponse.model_validate(order)
    )
