from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State

from roster_browser.core.table_view import TableViewState
from roster_browser.ui.callbacks.callbacks_utils import safe_filter_criteria
from roster_browser.ui.helpers import filter_options
from roster_browser.ui.ids import IDs

if TYPE_CHECKING:
    from roster_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)

# control id -> FilterCriteria axis
AXIS_BY_CONTROL = {
    IDs.Control.STATUS_FILTER: "status",
    IDs.Control.BRANCH_FILTER: "branch",
    IDs.Control.PROGRAM_FILTER: "program",
    IDs.Control.PAYMENT_FILTER: "payment_status",
    IDs.Control.ADMISSION_FILTER: "admission_window",
}


def register_filter_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    cfg = ctx.global_config
    controls = list(AXIS_BY_CONTROL)

    # ---------------------------------------------------------
    # One filter changed -> new criteria (dependents reset),
    # then refresh every radio's options/counts and value
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.FILTER_STATE, "data"),
        *[Output(c, "value") for c in controls],
        *[Output(c, "options") for c in controls],
        *[Input(c, "value") for c in controls],
        Input(IDs.Store.DATA_VERSION, "data"),
        State(IDs.Store.FILTER_STATE, "data"),
    )
    def update_filter_state(*args):
        values = args[:len(controls)]
        filter_data = args[-1]

        criteria = safe_filter_criteria(filter_data, cfg.default_status)
        triggered = dash.ctx.triggered_id
        if triggered in AXIS_BY_CONTROL:
            idx = controls.index(triggered)
            criteria = criteria.with_axis(AXIS_BY_CONTROL[triggered], values[idx])
            logger.debug("Filter changed", extra={"axis": AXIS_BY_CONTROL[triggered], "value": values[idx]})

        view, _ = ctx.service.view(TableViewState(criteria=criteria, page_size=cfg.rows_per_page))
        options = filter_options(view)

        # program shown as "all" when the stored one is no longer offered
        shown = view.criteria
        control_values = [getattr(shown, AXIS_BY_CONTROL[c]) for c in controls]
        control_options = [options[AXIS_BY_CONTROL[c]] for c in controls]

        return (criteria.to_dict(), *control_values, *control_options)
