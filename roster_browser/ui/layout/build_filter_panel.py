from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from roster_browser.core.filter_state import FilterCriteria
from roster_browser.core.sorting import ASCENDING, SortDescriptor
from roster_browser.core.table_view import COLUMNS
from roster_browser.ui.ids import IDs


def _radio_group(label: str, component_id: str, value: str) -> html.Div:
    # options are filled by the filter callback, with counts
    return html.Div(
        [
            html.Label(label, className="form-label fw-semibold"),
            dbc.RadioItems(id=component_id, options=[], value=value, className="mb-3"),
        ]
    )


def build_filter_panel(criteria: FilterCriteria, sort: SortDescriptor, visible_columns) -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader("Filters", className="fw-semibold"),
            dbc.CardBody(
                [
                    dbc.Input(
                        id=IDs.Control.SEARCH_INPUT,
                        type="search",
                        placeholder="Search",
                        debounce=True,
                        className="mb-3",
                    ),
                    _radio_group("Status", IDs.Control.STATUS_FILTER, criteria.status),
                    _radio_group("Branch", IDs.Control.BRANCH_FILTER, criteria.branch),
                    _radio_group("Payment Status", IDs.Control.PAYMENT_FILTER, criteria.payment_status),
                    _radio_group("Program", IDs.Control.PROGRAM_FILTER, criteria.program),
                    _radio_group("Admission Date", IDs.Control.ADMISSION_FILTER, criteria.admission_window),
                    html.Hr(),

                    html.Label("Sort by", className="form-label fw-semibold"),
                    dbc.InputGroup(
                        [
                            dcc.Dropdown(
                                id=IDs.Control.SORT_COLUMN,
                                options=[{"label": label, "value": cid} for cid, label in COLUMNS],
                                value=sort.column,
                                clearable=False,
                                style={"flex": "1"},
                            ),
                            dbc.Button(
                                "Asc" if sort.direction == ASCENDING else "Desc",
                                id=IDs.Control.SORT_DIRECTION_BTN,
                                color="secondary",
                                outline=True,
                            ),
                        ],
                        className="mb-3",
                    ),

                    html.Label("Columns", className="form-label fw-semibold"),
                    dbc.Checklist(
                        id=IDs.Control.VISIBLE_COLUMNS,
                        options=[{"label": label, "value": cid} for cid, label in COLUMNS],
                        value=list(visible_columns),
                        switch=True,
                    ),
                ]
            ),
        ],
        className="rb-sidebar",
    )


