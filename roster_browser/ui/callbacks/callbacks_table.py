from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Tuple

import dash
from dash import Input, Output, State

from roster_browser.core.pagination import clamp_page
from roster_browser.core.sorting import ASCENDING, SortDescriptor
from roster_browser.ui.callbacks.callbacks_utils import parse_page, safe_sort
from roster_browser.ui.helpers import (
    status_figure,
    table_columns,
    table_rows,
    view_state_from_stores,
)
from roster_browser.ui.ids import IDs

if TYPE_CHECKING:
    from roster_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def resolve_page(triggered: Any, active_page: Any, jump_value: Any, current: Any) -> Optional[int]:
    """
    Page requested by whatever fired the page callback.

    The pager and the jump box ask for their own value, a data reload keeps
    the current page, and filter or search changes go back to page 1.
    Returns None when the requested value is not a usable page number.
    """
    if triggered == IDs.Control.PAGINATION:
        return parse_page(active_page)
    if triggered == IDs.Control.PAGE_JUMP_INPUT:
        return parse_page(jump_value)
    if triggered == IDs.Store.DATA_VERSION:
        return parse_page(current)
    return 1


def page_outputs(page: int, n_pages: int, current: Any, active_page: Any) -> Tuple[Any, Any, int]:
    """(page-state, pager active_page, pager max_value), clamped to the view."""
    page = clamp_page(page, n_pages)
    return (
        page if page != current else dash.no_update,
        page if page != active_page else dash.no_update,
        n_pages,
    )


def register_table_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    cfg = ctx.global_config

    # ---------------------------------------------------------
    # Sort column / direction
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SORT_STATE, "data"),
        Output(IDs.Control.SORT_DIRECTION_BTN, "children"),
        Input(IDs.Control.SORT_COLUMN, "value"),
        Input(IDs.Control.SORT_DIRECTION_BTN, "n_clicks"),
        State(IDs.Store.SORT_STATE, "data"),
    )
    def update_sort(column, _n_clicks, sort_data):
        sort = safe_sort(sort_data, cfg.default_sort)
        if dash.ctx.triggered_id == IDs.Control.SORT_DIRECTION_BTN:
            sort = sort.toggled()
        elif column:
            sort = SortDescriptor(column=column, direction=sort.direction)
        label = "Asc" if sort.direction == ASCENDING else "Desc"
        return sort.to_dict(), label

    # ---------------------------------------------------------
    # Page index: reset on search/filter change, clamp after reloads,
    # else follow the pager / jump box
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.PAGE_STATE, "data"),
        Output(IDs.Control.PAGINATION, "active_page"),
        Output(IDs.Control.PAGINATION, "max_value"),
        Input(IDs.Control.PAGINATION, "active_page"),
        Input(IDs.Control.PAGE_JUMP_INPUT, "value"),
        Input(IDs.Store.FILTER_STATE, "data"),
        Input(IDs.Control.SEARCH_INPUT, "value"),
        Input(IDs.Store.DATA_VERSION, "data"),
        State(IDs.Store.PAGE_STATE, "data"),
    )
    def update_page(active_page, jump_value, filter_data, search, _version, current):
        page = resolve_page(dash.ctx.triggered_id, active_page, jump_value, current)
        if page is None:
            return dash.no_update, dash.no_update, dash.no_update

        state = view_state_from_stores(
            filter_data, search, None, 1, cfg.rows_per_page, (), cfg.default_status
        )
        view, _ = ctx.service.view(state)
        return page_outputs(page, view.total_pages, current, active_page)

    # ---------------------------------------------------------
    # Render: filter -> sort -> paginate
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.STUDENT_TABLE, "data"),
        Output(IDs.Control.STUDENT_TABLE, "columns"),
        Output(IDs.Control.ROW_COUNT, "children"),
        Output(IDs.Control.LOAD_ALERT, "children"),
        Output(IDs.Control.LOAD_ALERT, "is_open"),
        Output(IDs.Control.STATUS_GRAPH, "figure"),
        Input(IDs.Store.FILTER_STATE, "data"),
        Input(IDs.Control.SEARCH_INPUT, "value"),
        Input(IDs.Store.SORT_STATE, "data"),
        Input(IDs.Store.PAGE_STATE, "data"),
        Input(IDs.Control.VISIBLE_COLUMNS, "value"),
        Input(IDs.Store.DATA_VERSION, "data"),
    )
    def render_table(filter_data, search, sort_data, page, visible, _version):
        state = view_state_from_stores(
            filter_data, search, sort_data, page, cfg.rows_per_page, visible, cfg.default_status
        )
        view, loaded = ctx.service.view(state)
        row_count = f"{len(view.filtered_items)} of {len(loaded.records)} students"

        return (
            table_rows(view.visible_items),
            table_columns(state.visible_columns),
            row_count,
            f"Could not load students: {loaded.error}" if loaded.error else "",
            bool(loaded.error),
            status_figure(view.filtered_items),
        )
