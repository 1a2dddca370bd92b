"""
Row selection for the student table.

A selection is either the "all filtered" sentinel or an explicit set of
record ids. The sentinel is never expanded when it is stored; it is
reinterpreted against whatever the filtered view holds at the moment it
is resolved (rendering the count, dispatching a bulk action).

Filtering never changes the tracked ids. Resolution intersects them with
the current view, so widening a filter again brings hidden selections
back.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Union


@dataclass(frozen=True)
class AllFiltered:
    """Every record currently passing the filters."""


@dataclass(frozen=True)
class Explicit:
    ids: FrozenSet[str] = field(default_factory=frozenset)


Selection = Union[AllFiltered, Explicit]


class SelectionTracker:

    def __init__(self, selection: Optional[Selection] = None):
        self.selection: Selection = selection if selection is not None else Explicit()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def toggle(self, record_id: Any, filtered_ids: Optional[Iterable[str]] = None) -> None:
        record_id = str(record_id)
        if isinstance(self.selection, AllFiltered):
            if filtered_ids is None:
                raise ValueError("filtered_ids is required to toggle out of 'all' mode")
            ids = set(map(str, filtered_ids))
        else:
            ids = set(self.selection.ids)

        if record_id in ids:
            ids.discard(record_id)
        else:
            ids.add(record_id)
        self.selection = Explicit(frozenset(ids))

    def select_all_visible(self, filtered_ids: Optional[Iterable[str]] = None) -> None:
        """
        Select everything in the filtered view.

        Without `filtered_ids` the sentinel is stored. Passing ids freezes
        the current view into an explicit set; the table does this while a
        search is active so clearing the search does not select more.
        """
        if filtered_ids is None:
            self.selection = AllFiltered()
        else:
            self.selection = Explicit(frozenset(map(str, filtered_ids)))

    def clear(self) -> None:
        self.selection = Explicit()

    def sync_page(
            self,
            page_ids: Iterable[str],
            selected_page_ids: Iterable[str],
            filtered_ids: Iterable[str],
    ) -> None:
        """
        Reconcile a page-level multi-select widget with the tracked set.

        Ids on the current page follow the widget; ids selected on other
        pages are kept.
        """
        page = set(map(str, page_ids))
        chosen = set(map(str, selected_page_ids)) & page

        if isinstance(self.selection, AllFiltered):
            filtered = set(map(str, filtered_ids))
            if page & filtered <= chosen:
                return
            current = filtered
        else:
            current = set(self.selection.ids)

        self.selection = Explicit(frozenset((current - page) | chosen))

    # ------------------------------------------------------------------
    # Resolution against the current filtered view
    # ------------------------------------------------------------------
    @property
    def is_all(self) -> bool:
        return isinstance(self.selection, AllFiltered)

    @property
    def is_empty(self) -> bool:
        return isinstance(self.selection, Explicit) and not self.selection.ids

    def resolve(self, filtered_ids: Iterable[str]) -> Union[AllFiltered, FrozenSet[str]]:
        if isinstance(self.selection, AllFiltered):
            return self.selection
        return self.selection.ids & frozenset(map(str, filtered_ids))

    def selected_ids(self, filtered_ids: Sequence[str]) -> List[str]:
        """Concrete selected ids, in the order of the filtered view."""
        if isinstance(self.selection, AllFiltered):
            return [str(i) for i in filtered_ids]
        return [str(i) for i in filtered_ids if str(i) in self.selection.ids]

    def count(self, filtered_ids: Sequence[str]) -> int:
        resolved = self.resolve(filtered_ids)
        if isinstance(resolved, AllFiltered):
            return len(filtered_ids)
        return len(resolved)

    # ------------------------------------------------------------------
    # Store (de)serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        if isinstance(self.selection, AllFiltered):
            return {"mode": "all"}
        return {"mode": "explicit", "ids": sorted(self.selection.ids)}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> SelectionTracker:
        if not isinstance(data, dict):
            return cls()
        if data.get("mode") == "all":
            return cls(AllFiltered())
        return cls(Explicit(frozenset(str(i) for i in data.get("ids") or [])))
