import logging
import math
from typing import Optional, Union

from app.schemas.discovery import Pagination

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def parse_int_param(
    raw: Optional[Union[str, int]], default: int, minimum: int = 1
) -> int:
    """
    Parse a numeric query parameter, falling back to default on bad input.

    None, blanks, non-integers ("abc", "1.5", "nan") and values below minimum
    all yield default.
    """
    if raw is None:
        return default
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        value = raw
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            logger.debug(f"Unparseable numeric parameter {raw!r}, using {default}")
            return default
    if value < minimum:
        return default
    return value


def paginate(total_items: int, page: int, limit: int) -> Pagination:
    """
    Compute the slice window and navigation flags for one page.

    Never raises: page < 1 becomes 1, limit < 1 becomes DEFAULT_LIMIT, and a
    page past the end gives an empty window at total_items.
    """
    total_items = max(0, total_items)
    page = max(DEFAULT_PAGE, page)
    if limit < 1:
        limit = DEFAULT_LIMIT

    total_pages = math.ceil(total_items / limit) if total_items else 0
    start_index = min((page - 1) * limit, total_items)
    end_index = min(start_index + limit, total_items)

    return Pagination(
        currentPage=page,
        itemsPerPage=limit,
        totalItems=total_items,
        totalPages=total_pages,
        startIndex=start_index,
        endIndex=end_index,
        hasNext=page < total_pages,
        hasPrevious=page > 1,
    )
