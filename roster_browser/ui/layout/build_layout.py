from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc

from roster_browser.core.filter_state import FilterCriteria
from roster_browser.core.selection import SelectionTracker
from roster_browser.ui.ids import IDs
from roster_browser.ui.layout.build_filter_panel import build_filter_panel
from roster_browser.ui.layout.build_modals import build_edit_modal, build_view_modal
from roster_browser.ui.layout.build_navbar import build_navbar
from roster_browser.ui.layout.build_table_panel import build_table_panel

if TYPE_CHECKING:
    from roster_browser.ui.config import AppConfig


def build_layout(ctx: AppConfig):
    cfg = ctx.global_config
    criteria = FilterCriteria(status=cfg.default_status)

    return dbc.Container(
        fluid=True,
        className="rb-root",
        children=[
            build_navbar(cfg),

            # View state
            dcc.Store(id=IDs.Store.FILTER_STATE, data=criteria.to_dict(), storage_type="session"),
            dcc.Store(id=IDs.Store.SORT_STATE, data=cfg.default_sort.to_dict(), storage_type="session"),
            dcc.Store(id=IDs.Store.PAGE_STATE, data=1),
            dcc.Store(id=IDs.Store.SELECTION_STATE, data=SelectionTracker().to_dict()),
            dcc.Store(id=IDs.Store.DATA_VERSION, data=0),

            dbc.Row(
                [
                    dbc.Col(
                        build_filter_panel(criteria, cfg.default_sort, cfg.visible_columns),
                        md=3,
                        className="mt-2",
                    ),
                    dbc.Col(
                        build_table_panel(ctx.bulk_actions.values()),
                        md=9,
                        className="mt-2",
                    ),
                ],
                className="gx-3",
            ),
            build_view_modal(),
            build_edit_modal(cfg.edit_statuses),
        ],
    )
