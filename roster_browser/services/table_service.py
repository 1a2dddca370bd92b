from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence

from roster_browser.core.cache import QueryCache
from roster_browser.core.exceptions import MutationError, RosterBrowserError
from roster_browser.core.records import Record, ReferenceCollection, References, record_id
from roster_browser.core.selection import SelectionTracker
from roster_browser.core.table_view import TableView, TableViewState, derive_view
from roster_browser.services.bulk_actions import BulkAction, BulkActionDispatcher, BulkResult
from roster_browser.services.data_source import DataSourceAdapter

logger = logging.getLogger(__name__)

STUDENTS_KEY = "students"


@dataclass(frozen=True)
class LoadResult:
    records: List[Record] = field(default_factory=list)
    references: References = field(default_factory=References)
    error: Optional[str] = None


@dataclass(frozen=True)
class MutationResult:
    ok: bool
    error: Optional[str] = None


class StudentTableService:
    """
    One logical student-table instance: owns the query cache, the data
    source and the bulk action dispatcher.

    Remote failures are returned as results, never raised into callers
    that render.
    """

    def __init__(
            self,
            source: DataSourceAdapter,
            cache: Optional[QueryCache] = None,
            records_stale_after: float = 60.0,
            reference_stale_after: float = 300.0,
    ):
        self.source = source
        self.cache = cache or QueryCache()
        self.records_stale_after = records_stale_after
        self.reference_stale_after = reference_stale_after
        self.dispatcher = BulkActionDispatcher(source.client, self.cache, STUDENTS_KEY)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def load(self) -> LoadResult:
        students = self.cache.fetch(STUDENTS_KEY, self.source.fetch_all, self.records_stale_after)
        branches = self.cache.fetch(
            "branches", lambda: self.source.fetch_reference("branches"), self.reference_stale_after
        )
        programs = self.cache.fetch(
            "programs", lambda: self.source.fetch_reference("programs"), self.reference_stale_after
        )

        errors = [s.error for s in (students, branches, programs) if s.error]
        references = References(
            branches=branches.data or ReferenceCollection(kind="branches"),
            programs=programs.data or ReferenceCollection(kind="programs"),
        )
        return LoadResult(
            records=list(students.data or []),
            references=references,
            error="; ".join(errors) if errors else None,
        )

    def refresh(self) -> None:
        self.cache.invalidate_all()

    def view(self, state: TableViewState, now: Optional[datetime] = None) -> tuple[TableView, LoadResult]:
        loaded = self.load()
        return derive_view(loaded.records, loaded.references, state, now), loaded

    def find(self, rid: Any) -> Optional[Record]:
        for r in self.cache.get(STUDENTS_KEY) or []:
            if record_id(r) == str(rid):
                return r
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def delete(self, rid: Any) -> MutationResult:
        try:
            self.source.delete(rid)
        except MutationError as e:
            logger.error("Delete failed", extra={"student_id": str(rid), "error": str(e)})
            return MutationResult(ok=False, error=str(e))
        self.cache.invalidate(STUDENTS_KEY)
        return MutationResult(ok=True)

    def update(self, record: Mapping[str, Any], changes: Mapping[str, Any]) -> MutationResult:
        try:
            self.source.update(record, changes)
        except MutationError as e:
            logger.error("Update failed", extra={"student_id": record_id(record), "error": str(e)})
            return MutationResult(ok=False, error=str(e))
        self.cache.invalidate(STUDENTS_KEY)
        return MutationResult(ok=True)

    def bulk(
            self,
            action: BulkAction,
            tracker: SelectionTracker,
            filtered_ids: Sequence[str],
    ) -> BulkResult:
        try:
            return self.dispatcher.apply(action, tracker, filtered_ids)
        except RosterBrowserError as e:
            return BulkResult(ok=False, error=str(e))
