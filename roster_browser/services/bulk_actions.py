from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from roster_browser.core.cache import QueryCache
from roster_browser.core.exceptions import BulkActionInFlightError, EmptySelectionError
from roster_browser.core.selection import SelectionTracker
from roster_browser.services.rpc_client import RpcClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkAction:
    """
    One operation applied to a batch of student ids in a single RPC.

    The ids are sent under `ids_param`; `params` carries the fixed
    arguments (e.g. the new payment status).
    """
    key: str
    label: str
    function: str
    params: Mapping[str, Any] = field(default_factory=dict)
    ids_param: str = "student_ids"

    def build_params(self, ids: Sequence[str]) -> Dict[str, Any]:
        return {self.ids_param: list(ids), **self.params}


MARK_PAID = BulkAction(
    key="mark-paid",
    label="Mark as Paid",
    function="update_payment_status_bulk",
    params={"new_status": "Paid"},
)

MARK_UNPAID = BulkAction(
    key="mark-unpaid",
    label="Mark as Unpaid",
    function="update_payment_status_bulk",
    params={"new_status": "Unpaid"},
)


@dataclass(frozen=True)
class BulkResult:
    ok: bool
    affected: int = 0
    error: Optional[str] = None


class BulkActionDispatcher:
    """
    Applies a bulk action to the resolved selection.

    The backend operation is treated as all-or-nothing: on an error
    nothing local changes; on success the records query is invalidated
    and the selection cleared.
    """

    def __init__(self, client: RpcClient, cache: QueryCache, cache_key: str = "students"):
        self.client = client
        self.cache = cache
        self.cache_key = cache_key
        self._lock = threading.Lock()
        self._in_flight: Set[str] = set()

    def is_in_flight(self, action: BulkAction) -> bool:
        with self._lock:
            return action.key in self._in_flight

    def apply(
            self,
            action: BulkAction,
            tracker: SelectionTracker,
            filtered_ids: Sequence[str],
    ) -> BulkResult:
        ids: List[str] = tracker.selected_ids(filtered_ids)
        if not ids:
            raise EmptySelectionError(f"Nothing selected for '{action.label}'")

        with self._lock:
            if action.key in self._in_flight:
                raise BulkActionInFlightError(f"'{action.label}' is already running")
            self._in_flight.add(action.key)

        try:
            response = self.client.call(action.function, action.build_params(ids))
        finally:
            with self._lock:
                self._in_flight.discard(action.key)

        if not response.ok:
            logger.error(
                "Bulk action failed",
                extra={"action": action.key, "n_ids": len(ids), "error": response.error},
            )
            return BulkResult(ok=False, affected=0, error=response.error)

        self.cache.invalidate(self.cache_key)
        tracker.clear()
        logger.info("Bulk action applied", extra={"action": action.key, "n_ids": len(ids)})
        return BulkResult(ok=True, affected=len(ids))
