from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import dash_bootstrap_components as dbc
from dash import Dash

from roster_browser.config.loader import load_global_config
from roster_browser.config.model import GlobalConfig
from roster_browser.core.cache import QueryCache
from roster_browser.core.exceptions import ConfigError
from roster_browser.services.data_source import DataSourceAdapter
from roster_browser.services.rpc_client import HttpRpcClient, RpcClient
from roster_browser.services.table_service import StudentTableService
from roster_browser.ui.callbacks.callbacks_actions import register_action_callbacks
from roster_browser.ui.callbacks.callbacks_filters import register_filter_callbacks
from roster_browser.ui.callbacks.callbacks_selection import register_selection_callbacks
from roster_browser.ui.callbacks.callbacks_table import register_table_callbacks
from roster_browser.ui.config import AppConfig
from roster_browser.ui.layout.build_layout import build_layout

logger = logging.getLogger(__name__)


def _build_client(global_config: GlobalConfig) -> RpcClient:
    backend = global_config.backend
    if not backend.url:
        raise ConfigError("No backend url configured (backend.url or ROSTER_BACKEND_URL)")
    if not backend.api_key:
        raise ConfigError(f"Backend key missing: set {backend.key_env}")
    return HttpRpcClient(backend.url, backend.api_key, timeout=backend.timeout)


def build_service(global_config: GlobalConfig, client: RpcClient) -> StudentTableService:
    source = DataSourceAdapter(client, page_size=global_config.fetch_page_size)
    return StudentTableService(
        source,
        cache=QueryCache(),
        records_stale_after=global_config.records_stale_seconds,
        reference_stale_after=global_config.reference_stale_seconds,
    )


def create_dash_app(
        config_root: Path | str = Path("config"),
        client: Optional[RpcClient] = None,
) -> Dash:
    config_root = Path(config_root)

    # 1) Load Config
    global_config = load_global_config(config_root)

    # 2) Initialize Service Layer
    client = client or _build_client(global_config)
    service = build_service(global_config, client)

    # 3) App Context
    ctx = AppConfig(global_config=global_config, service=service)
    ctx.validate()

    assets_path = Path(__file__).parent / "assets"

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
    )
    app.title = global_config.ui_title
    app.layout = build_layout(ctx)

    # Register callbacks
    register_filter_callbacks(app, ctx)
    register_table_callbacks(app, ctx)
    register_selection_callbacks(app, ctx)
    register_action_callbacks(app, ctx)

    logger.info(
        "Dash app created",
        extra={"config_root": str(config_root), "backend_url": global_config.backend.url},
    )
    return app
