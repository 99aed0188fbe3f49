# File: common/utils/pagination.py

from math import ceil
from typing import Any, Dict


def build_pagination(total: int, page: int = 1, limit: int = 10) -> Dict[str, Any]:
    """
    Build the pagination block returned next to every paginated list.

    Args:
        total (int): Total number of matching items.
        page (int): Current page number, starting at 1.
        limit (int): Number of items per page.

    Returns:
        Dict[str, Any]: total, current_page, total_pages, has_next_page, has_previous_page.
    """
    total_pages = ceil(total / limit) if limit > 0 else 0
    return {
        "total": total,
        "current_page": page,
        "total_pages": total_pages,
        "has_next_page": page < total_pages,
        "has_previous_page": page > 1,
    }
