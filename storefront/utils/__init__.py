"""Utilities package"""

from .pagination import paginate, page_count, PaginationInfo

__all__ = [
    "paginate",
    "page_count",
    "PaginationInfo",
]
