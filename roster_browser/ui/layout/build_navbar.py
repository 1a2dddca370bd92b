from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html

from roster_browser.config.model import GlobalConfig
from roster_browser.ui.ids import IDs


def build_navbar(global_config: GlobalConfig) -> dbc.Navbar:
    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                html.Div(
                    [
                        html.H2(global_config.ui_title, className="mb-0"),
                        html.Small("Students", className="text-muted"),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),
                dbc.Button(
                    "Refresh",
                    id=IDs.Control.REFRESH_BTN,
                    color="secondary",
                    outline=True,
                    size="sm",
                ),
            ],
        ),
        className="rb-navbar mb-2",
    )
