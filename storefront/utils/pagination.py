"""
Pagination utilities
"""

from typing import Any, Dict
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from storefront.schemas.base import BaseSchema

class PaginationInfo(BaseSchema):
    """Pagination block returned alongside list results"""
    current_page: int
    total_pages: int
    total_orders: int
    has_next: bool
    has_prev: bool

def page_count(total: int, size: int) -> int:
    return (total + size - 1) // size

async def paginate(
    db: AsyncSession,
    query: Select,
    page: int = 1,
    size: int = 20
) -> Dict[str, Any]:
    """
    Paginate query results

    Args:
        db: Database session
        query: SQLAlchemy query
        page: Page number
        size: Page size

    Returns:
        Dictionary with ``items`` and a ``pagination`` block
    """
    # Get total count
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = await db.scalar(count_query) or 0

    pages = page_count(total, size)

    # Apply pagination
    offset = (page - 1) * size
    result = await db.execute(query.offset(offset).limit(size))
    items = result.scalars().all()

    return {
        "items": items,
        "pagination": PaginationInfo(
            current_page=page,
            total_pages=pages,
            total_orders=total,
            has_next=page < pages,
            has_prev=page > 1,
        ),
    }
