from __future__ import annotations

import logging
from typing import Optional

from roster_browser.core.filter_state import FilterCriteria
from roster_browser.core.sorting import SortDescriptor

logger = logging.getLogger(__name__)


def safe_filter_criteria(data: object, default_status: str = "active") -> FilterCriteria:
    """Criteria from the filter-state store; defaults if the store is corrupt."""
    if not isinstance(data, dict):
        return FilterCriteria(status=default_status)
    try:
        return FilterCriteria.from_dict(data, default_status=default_status)
    except (TypeError, ValueError):
        logger.exception("Invalid filter-state: %r", data)
        return FilterCriteria(status=default_status)


def safe_sort(data: object, default: Optional[SortDescriptor] = None) -> SortDescriptor:
    default = default or SortDescriptor()
    if not isinstance(data, dict):
        return default
    try:
        return SortDescriptor.from_dict(data)
    except ValueError:
        logger.exception("Invalid sort-state: %r", data)
        return default


def parse_page(value: object) -> Optional[int]:
    try:
        page = int(value)
    except (TypeError, ValueError):
        return None
    return page if page >= 1 else None
