from __future__ import annotations

from typing import Iterable

import dash_bootstrap_components as dbc
from dash import dash_table, dcc, html

from roster_browser.services.bulk_actions import BulkAction
from roster_browser.ui.ids import IDs, bulk_action_id


def _bulk_menu(actions: Iterable[BulkAction]) -> dbc.DropdownMenu:
    items = [
        dbc.DropdownMenuItem(action.label, id=bulk_action_id(action.key))
        for action in actions
    ]
    items.append(dbc.DropdownMenuItem(divider=True))
    items.append(dbc.DropdownMenuItem("Clear selection", id=IDs.Control.CLEAR_SELECTION_BTN))
    return dbc.DropdownMenu(
        items,
        id=IDs.Control.BULK_MENU,
        label="Selected actions",
        color="primary",
        size="sm",
        disabled=True,
        className="me-2",
    )


def _row_actions() -> html.Div:
    return html.Div(
        [
            dbc.Button("View", id=IDs.Control.VIEW_BTN, size="sm", color="secondary",
                       outline=True, className="me-1", disabled=True),
            dbc.Button("Edit", id=IDs.Control.EDIT_BTN, size="sm", color="secondary",
                       outline=True, className="me-1", disabled=True),
            dbc.Button("Delete", id=IDs.Control.DELETE_BTN, size="sm", color="danger",
                       outline=True, disabled=True),
            dcc.ConfirmDialog(id=IDs.Control.DELETE_CONFIRM, message="Delete this student?"),
        ],
        className="d-flex align-items-center",
    )


def build_table_panel(actions: Iterable[BulkAction]) -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [
                        html.Strong("Students", className="me-3"),
                        html.Span(id=IDs.Control.ROW_COUNT, className="text-muted me-auto"),
                        html.Span("0 selected", id=IDs.Control.SELECTION_COUNT, className="me-2"),
                        dbc.Button(
                            "Select all",
                            id=IDs.Control.SELECT_ALL_BTN,
                            size="sm",
                            color="link",
                            className="me-2",
                        ),
                        _bulk_menu(actions),
                        _row_actions(),
                    ],
                    className="d-flex align-items-center",
                ),
                className="p-2",
            ),
            dbc.CardBody(
                [
                    dbc.Alert(id=IDs.Control.LOAD_ALERT, color="danger", is_open=False),
                    dbc.Alert(id=IDs.Control.BULK_ALERT, is_open=False, dismissable=True, duration=6000),
                    dbc.Alert(id=IDs.Control.ROW_ALERT, is_open=False, dismissable=True, duration=6000),
                    dcc.Loading(
                        dash_table.DataTable(
                            id=IDs.Control.STUDENT_TABLE,
                            columns=[],
                            data=[],
                            row_selectable="multi",
                            selected_rows=[],
                            page_action="none",
                            sort_action="none",
                            style_table={"overflowX": "auto"},
                            style_cell={"textAlign": "left", "padding": "6px"},
                            style_header={"fontWeight": "bold"},
                        ),
                        type="default",
                    ),
                    html.Div(
                        [
                            dbc.Pagination(
                                id=IDs.Control.PAGINATION,
                                max_value=1,
                                active_page=1,
                                previous_next=True,
                                first_last=True,
                                fully_expanded=False,
                                size="sm",
                                className="mb-0 me-3",
                            ),
                            dbc.Input(
                                id=IDs.Control.PAGE_JUMP_INPUT,
                                type="number",
                                min=1,
                                step=1,
                                placeholder="Go to page",
                                debounce=True,
                                size="sm",
                                style={"width": "120px"},
                            ),
                        ],
                        className="d-flex align-items-center justify-content-end mt-2",
                    ),
                    dcc.Graph(id=IDs.Control.STATUS_GRAPH, config={"displayModeBar": False}),
                ],
            ),
        ],
        className="rb-maincard",
    )
