from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Collection, List, Optional, Sequence, Tuple

import dash
from dash import Input, Output, State

from roster_browser.core.selection import SelectionTracker
from roster_browser.ui.helpers import selection_summary, view_state_from_stores
from roster_browser.ui.ids import IDs

if TYPE_CHECKING:
    from roster_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

ROW_CHECKBOXES = f"{IDs.Control.STUDENT_TABLE}.selected_rows"


def apply_selection_trigger(
        tracker: SelectionTracker,
        triggered: Any,
        triggered_props: Collection[str],
        selected_rows: Optional[Sequence[int]],
        page_ids: Sequence[str],
        filtered_ids: Sequence[str],
        searching: bool,
) -> None:
    if triggered == IDs.Control.CLEAR_SELECTION_BTN:
        tracker.clear()
    elif triggered == IDs.Control.SELECT_ALL_BTN:
        # with a search active the current hits are frozen
        tracker.select_all_visible(filtered_ids if searching else None)
    elif ROW_CHECKBOXES in triggered_props:
        chosen = [page_ids[i] for i in selected_rows or [] if 0 <= i < len(page_ids)]
        tracker.sync_page(page_ids, chosen, filtered_ids)


def selection_display(
        tracker: SelectionTracker,
        page_ids: Sequence[str],
        filtered_ids: Sequence[str],
) -> Tuple[List[int], str, bool]:
    """Checked row indices on the page, the count label, and whether the bulk menu is disabled."""
    selected = set(tracker.selected_ids(filtered_ids))
    rows_on_page = [i for i, rid in enumerate(page_ids) if rid in selected]
    return rows_on_page, selection_summary(tracker, filtered_ids), tracker.count(filtered_ids) == 0


def register_selection_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    cfg = ctx.global_config

    # ---------------------------------------------------------
    # Tracked selection <-> page checkboxes, count and bulk menu.
    # Re-runs whenever the rendered page or the store changes.
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SELECTION_STATE, "data"),
        Output(IDs.Control.STUDENT_TABLE, "selected_rows"),
        Output(IDs.Control.SELECTION_COUNT, "children"),
        Output(IDs.Control.BULK_MENU, "disabled"),
        Input(IDs.Control.STUDENT_TABLE, "selected_rows"),
        Input(IDs.Control.SELECT_ALL_BTN, "n_clicks"),
        Input(IDs.Control.CLEAR_SELECTION_BTN, "n_clicks"),
        Input(IDs.Control.STUDENT_TABLE, "data"),
        Input(IDs.Store.SELECTION_STATE, "data"),
        State(IDs.Store.FILTER_STATE, "data"),
        State(IDs.Control.SEARCH_INPUT, "value"),
        State(IDs.Store.SORT_STATE, "data"),
        prevent_initial_call=True,
    )
    def update_selection(selected_rows, _all_clicks, _clear_clicks, page_rows,
                         selection_data, filter_data, search, sort_data):
        tracker = SelectionTracker.from_dict(selection_data)
        before = tracker.to_dict()
        state = view_state_from_stores(
            filter_data, search, sort_data, 1, cfg.rows_per_page, (), cfg.default_status
        )
        view, _ = ctx.service.view(state)
        filtered_ids = view.filtered_ids
        page_ids = [str(row["id"]) for row in page_rows or []]

        apply_selection_trigger(
            tracker, dash.ctx.triggered_id, dash.ctx.triggered_prop_ids,
            selected_rows, page_ids, filtered_ids, bool(state.search),
        )

        after = tracker.to_dict()
        if after != before:
            logger.debug("Selection changed", extra={"selection_mode": after["mode"]})

        rows_on_page, summary, menu_disabled = selection_display(tracker, page_ids, filtered_ids)
        return (
            after if after != before else dash.no_update,
            rows_on_page,
            summary,
            menu_disabled,
        )
