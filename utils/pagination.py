"""Page/limit handling shared by every list endpoint."""

import math
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings
from django.core.paginator import EmptyPage, Paginator


def _setting(name: str, fallback: int) -> int:
    return getattr(settings, "MARKETPLACE", {}).get(name, fallback)


def _positive_int(raw, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def parse_page_params(query_params, default_limit: Optional[int] = None) -> Tuple[int, int]:
    """Read ``page`` and ``limit`` from a query dict. Bad values fall back to defaults."""
    default_limit = default_limit or _setting("DEFAULT_PAGE_SIZE", 10)
    page = _positive_int(query_params.get("page"), 1)
    limit = min(_positive_int(query_params.get("limit"), default_limit), _setting("MAX_PAGE_SIZE", 100))
    return page, limit


def paginate(queryset, page: int, limit: int) -> Tuple[List[Any], Dict[str, int]]:
    """
    Slice ``queryset`` and describe the slice.

    Returns:
        (items, {"total", "page", "limit", "pages"}). A page past the end yields no items.
    """
    paginator = Paginator(queryset, limit)
    try:
        items = list(paginator.page(page).object_list)
    except EmptyPage:
        items = []
    total = paginator.count
    return items, {"total": total, "page": page, "limit": limit, "pages": math.ceil(total / limit)}
