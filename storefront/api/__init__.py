"""API router aggregation"""

from fastapi import APIRouter

from .orders.router import router as orders_router
from .cart.router import router as cart_router

api_router = APIRouter()

api_router.include_router(orders_router, prefix="/orders", tags=["Orders"])
api_router.include_router(cart_router, prefix="/cart", tags=["Cart"])
