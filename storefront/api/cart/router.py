"""Cart API routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.database import get_db
from storefront.core.security import get_current_user
from .schemas import (
    CartItemAdd,
    CartItemUpdate,
    CartItemRemove,
    CartEnvelope,
    CartCountResponse,
)
from .services import CartService

router = APIRouter()

@router.get("", response_model=CartEnvelope, summary="Get cart")
async def get_cart(
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get the caller's cart, creating an empty one on first access"""
    service = CartService(db)
    cart = await service.get_or_create_cart(current_user.id)
    return CartEnvelope(cart=await service.build_response(cart))

@router.post("/add", response_model=CartEnvelope, summary="Add item to cart")
async def add_to_cart(
    item_data: CartItemAdd,
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.add_to_cart(
        user_id=current_user.id,
        product_id=item_data.product_id,
        quantity=item_data.quantity
    )
    return CartEnvelope(
        message="Item added to cart successfully",
        cart=await service.build_response(cart)
    )

@router.put("/update", response_model=CartEnvelope, summary="Update item quantity")
async def update_cart_item(
    update_data: CartItemUpdate,
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.update_cart_item(
        user_id=current_user.id,
        product_id=update_data.product_id,
        quantity=update_data.quantity
    )
    return CartEnvelope(
        message="Cart updated successfully",
        cart=await service.build_response(cart)
    )

@router.delete("/remove", response_model=CartEnvelope, summary="Remove item from cart")
async def remove_from_cart(
    item: CartItemRemove,
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.remove_from_cart(current_user.id, item.product_id)
    return CartEnvelope(
        message="Item removed from cart successfully",
        cart=await service.build_response(cart)
    )

@router.delete("/clear", response_model=CartEnvelope, summary="Clear cart")
async def clear_cart(
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    cart = await service.clear_cart(current_user.id)
    return CartEnvelope(
        message="Cart cleared successfully",
        cart=await service.build_response(cart)
    )

@router.get("/count", response_model=CartCountResponse, summary="Get cart item count")
async def get_cart_count(
    current_user=Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    return CartCountResponse(count=await service.count_items(current_user.id))
