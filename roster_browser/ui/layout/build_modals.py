from __future__ import annotations

from typing import Iterable

import dash_bootstrap_components as dbc
from dash import html

from roster_browser.ui.ids import IDs


def build_view_modal() -> dbc.Modal:
    return dbc.Modal(
        [
            dbc.ModalHeader(dbc.ModalTitle("Student")),
            dbc.ModalBody(id=IDs.Control.VIEW_MODAL_BODY),
        ],
        id=IDs.Control.VIEW_MODAL,
        size="lg",
        is_open=False,
    )


def _field(label: str, component) -> html.Div:
    return html.Div([dbc.Label(label), component], className="mb-2")


def build_edit_modal(statuses: Iterable[str]) -> dbc.Modal:
    return dbc.Modal(
        [
            dbc.ModalHeader(dbc.ModalTitle("Edit student")),
            dbc.ModalBody(
                [
                    _field("First name", dbc.Input(id=IDs.Control.EDIT_FIRST_NAME)),
                    _field("Last name", dbc.Input(id=IDs.Control.EDIT_LAST_NAME)),
                    _field("Phone", dbc.Input(id=IDs.Control.EDIT_PHONE)),
                    _field("Email", dbc.Input(id=IDs.Control.EDIT_EMAIL, type="email")),
                    _field(
                        "Status",
                        dbc.Select(
                            id=IDs.Control.EDIT_STATUS,
                            options=[{"label": s.capitalize(), "value": s} for s in statuses],
                        ),
                    ),
                    html.Div(id=IDs.Control.EDIT_ERROR, className="text-danger small"),
                ]
            ),
            dbc.ModalFooter(dbc.Button("Save", id=IDs.Control.EDIT_SAVE_BTN, color="primary")),
        ],
        id=IDs.Control.EDIT_MODAL,
        is_open=False,
    )
