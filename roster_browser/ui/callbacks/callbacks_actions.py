from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Tuple

import dash
from dash import ALL, Input, Output, State

from roster_browser.core.selection import SelectionTracker
from roster_browser.services.bulk_actions import BulkAction, BulkResult
from roster_browser.ui.helpers import record_details, view_state_from_stores
from roster_browser.ui.ids import IDs

if TYPE_CHECKING:
    from roster_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    (IDs.Control.EDIT_FIRST_NAME, "first_name"),
    (IDs.Control.EDIT_LAST_NAME, "last_name"),
    (IDs.Control.EDIT_PHONE, "phone"),
    (IDs.Control.EDIT_EMAIL, "email"),
    (IDs.Control.EDIT_STATUS, "status"),
)


def _active_row_id(active_cell) -> str | None:
    if not isinstance(active_cell, dict) or active_cell.get("row_id") is None:
        return None
    return str(active_cell["row_id"])


def bulk_outputs(
        action: BulkAction,
        result: BulkResult,
        tracker: SelectionTracker,
        version: Optional[int],
) -> Tuple[Any, Any, str, str, bool]:
    """
    (selection-state, data-version, alert text, alert color, alert open)
    after a bulk run. A failure leaves the selection and data untouched.
    """
    if not result.ok:
        return dash.no_update, dash.no_update, f"Update failed: {result.error}", "danger", True

    message = f"{action.label}: {result.affected} student(s) updated"
    return tracker.to_dict(), (version or 0) + 1, message, "success", True


def register_action_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    cfg = ctx.global_config
    service = ctx.service

    # ---------------------------------------------------------
    # Bulk actions over the resolved selection
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SELECTION_STATE, "data", allow_duplicate=True),
        Output(IDs.Store.DATA_VERSION, "data", allow_duplicate=True),
        Output(IDs.Control.BULK_ALERT, "children"),
        Output(IDs.Control.BULK_ALERT, "color"),
        Output(IDs.Control.BULK_ALERT, "is_open"),
        Input({"type": IDs.Pattern.BULK_ACTION, "index": ALL}, "n_clicks"),
        State(IDs.Store.SELECTION_STATE, "data"),
        State(IDs.Store.FILTER_STATE, "data"),
        State(IDs.Control.SEARCH_INPUT, "value"),
        State(IDs.Store.DATA_VERSION, "data"),
        prevent_initial_call=True,
    )
    def run_bulk_action(clicks, selection_data, filter_data, search, version):
        triggered = dash.ctx.triggered_id
        if not isinstance(triggered, dict) or not any(clicks or []):
            return dash.no_update, dash.no_update, dash.no_update, dash.no_update, dash.no_update

        action = ctx.bulk_actions.get(triggered.get("index"))
        if action is None:
            logger.warning("Unknown bulk action", extra={"action": triggered.get("index")})
            return dash.no_update, dash.no_update, dash.no_update, dash.no_update, dash.no_update

        state = view_state_from_stores(filter_data, search, None, 1, cfg.rows_per_page, (), cfg.default_status)
        view, _ = service.view(state)
        tracker = SelectionTracker.from_dict(selection_data)

        result = service.bulk(action, tracker, view.filtered_ids)
        return bulk_outputs(action, result, tracker, version)

    # ---------------------------------------------------------
    # Row actions follow the table's active cell
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.VIEW_BTN, "disabled"),
        Output(IDs.Control.EDIT_BTN, "disabled"),
        Output(IDs.Control.DELETE_BTN, "disabled"),
        Input(IDs.Control.STUDENT_TABLE, "active_cell"),
    )
    def toggle_row_actions(active_cell):
        disabled = _active_row_id(active_cell) is None
        return disabled, disabled, disabled

    @app.callback(
        Output(IDs.Control.VIEW_MODAL, "is_open"),
        Output(IDs.Control.VIEW_MODAL_BODY, "children"),
        Input(IDs.Control.VIEW_BTN, "n_clicks"),
        State(IDs.Control.STUDENT_TABLE, "active_cell"),
        prevent_initial_call=True,
    )
    def view_student(_n, active_cell):
        rid = _active_row_id(active_cell)
        if rid is None:
            return dash.no_update, dash.no_update
        return True, record_details(service.find(rid))

    @app.callback(
        Output(IDs.Control.DELETE_CONFIRM, "displayed"),
        Input(IDs.Control.DELETE_BTN, "n_clicks"),
        prevent_initial_call=True,
    )
    def confirm_delete(_n):
        return True

    @app.callback(
        Output(IDs.Store.DATA_VERSION, "data", allow_duplicate=True),
        Output(IDs.Control.ROW_ALERT, "children", allow_duplicate=True),
        Output(IDs.Control.ROW_ALERT, "color", allow_duplicate=True),
        Output(IDs.Control.ROW_ALERT, "is_open", allow_duplicate=True),
        Input(IDs.Control.DELETE_CONFIRM, "submit_n_clicks"),
        State(IDs.Control.STUDENT_TABLE, "active_cell"),
        State(IDs.Store.DATA_VERSION, "data"),
        prevent_initial_call=True,
    )
    def delete_student(_n, active_cell, version):
        rid = _active_row_id(active_cell)
        if rid is None:
            return dash.no_update, dash.no_update, dash.no_update, dash.no_update
        result = service.delete(rid)
        if not result.ok:
            return dash.no_update, f"Error deleting student: {result.error}", "danger", True
        return (version or 0) + 1, "Student deleted", "success", True

    # ---------------------------------------------------------
    # Edit modal: open with current values, save through update_student
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.EDIT_MODAL, "is_open"),
        *[Output(cid, "value") for cid, _ in EDITABLE_FIELDS],
        Output(IDs.Control.EDIT_ERROR, "children"),
        Input(IDs.Control.EDIT_BTN, "n_clicks"),
        State(IDs.Control.STUDENT_TABLE, "active_cell"),
        prevent_initial_call=True,
    )
    def open_edit(_n, active_cell):
        record = service.find(_active_row_id(active_cell) or "")
        if record is None:
            return (dash.no_update,) * (len(EDITABLE_FIELDS) + 2)
        values = [record.get(field) or "" for _, field in EDITABLE_FIELDS]
        return (True, *values, "")

    @app.callback(
        Output(IDs.Control.EDIT_MODAL, "is_open", allow_duplicate=True),
        Output(IDs.Control.EDIT_ERROR, "children", allow_duplicate=True),
        Output(IDs.Store.DATA_VERSION, "data", allow_duplicate=True),
        Output(IDs.Control.ROW_ALERT, "children", allow_duplicate=True),
        Output(IDs.Control.ROW_ALERT, "color", allow_duplicate=True),
        Output(IDs.Control.ROW_ALERT, "is_open", allow_duplicate=True),
        Input(IDs.Control.EDIT_SAVE_BTN, "n_clicks"),
        *[State(cid, "value") for cid, _ in EDITABLE_FIELDS],
        State(IDs.Control.STUDENT_TABLE, "active_cell"),
        State(IDs.Store.DATA_VERSION, "data"),
        prevent_initial_call=True,
    )
    def save_edit(_n, *args):
        values, active_cell, version = args[:len(EDITABLE_FIELDS)], args[-2], args[-1]
        record = service.find(_active_row_id(active_cell) or "")
        if record is None:
            return dash.no_update, "Student not found", dash.no_update, dash.no_update, dash.no_update, dash.no_update

        changes = {field: value for (_, field), value in zip(EDITABLE_FIELDS, values)}
        result = service.update(record, changes)
        if not result.ok:
            # stay open with the message next to the form
            return dash.no_update, f"Update failed: {result.error}", dash.no_update, dash.no_update, dash.no_update, dash.no_update
        return False, "", (version or 0) + 1, "Student updated", "success", True

    # ---------------------------------------------------------
    # Refresh: drop every cached query
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.DATA_VERSION, "data", allow_duplicate=True),
        Input(IDs.Control.REFRESH_BTN, "n_clicks"),
        State(IDs.Store.DATA_VERSION, "data"),
        prevent_initial_call=True,
    )
    def refresh(_n, version):
        service.refresh()
        return (version or 0) + 1
