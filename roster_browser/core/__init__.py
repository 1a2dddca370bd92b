"""
Core domain layer: records, filter criteria, filter/sort/paginate pipeline,
selection tracking and the query cache
"""

from .cache import QueryCache
from .filter_state import FilterCriteria
from .selection import SelectionTracker
from .sorting import SortDescriptor
from .table_view import TableViewState, derive_view

__all__ = [
    "FilterCriteria",
    "QueryCache",
    "SelectionTracker",
    "SortDescriptor",
    "TableViewState",
    "derive_view",
]
