from __future__ import annotations

import json
import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from roster_browser.config.model import BackendConfig, GlobalConfig
from roster_browser.core.exceptions import ConfigError
from roster_browser.core.filter_state import ALL, STATUS_CHOICES
from roster_browser.core.sorting import SortDescriptor
from roster_browser.core.table_view import COLUMNS

logger = logging.getLogger(__name__)

_COLUMN_IDS = {cid for cid, _ in COLUMNS}


def _positive_int(raw: Mapping[str, Any], key: str, default: int) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"'{key}' must be a positive integer, got {value!r}")
    return value


def _non_negative_float(raw: Mapping[str, Any], key: str, default: float) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigError(f"'{key}' must be a non-negative number, got {value!r}")
    return float(value)


def parse_global_config(raw: Mapping[str, Any], root: Optional[Path] = None) -> GlobalConfig:
    """
    Build a GlobalConfig from the parsed global.json mapping.

    :raises ConfigError: on invalid values.
    """
    default_status = str(raw.get("default_status", "active"))
    if default_status != ALL and default_status not in STATUS_CHOICES:
        raise ConfigError(f"Unknown default_status '{default_status}'")

    try:
        default_sort = SortDescriptor.from_dict(raw.get("default_sort"))
    except ValueError as e:
        raise ConfigError(str(e)) from e

    visible = tuple(raw.get("visible_columns") or GlobalConfig().visible_columns)
    unknown = [c for c in visible if c not in _COLUMN_IDS]
    if unknown:
        raise ConfigError(f"Unknown visible_columns: {unknown}")

    backend_raw: Dict[str, Any] = dict(raw.get("backend") or {})
    backend = BackendConfig(
        url=str(backend_raw.get("url", "")),
        key_env=str(backend_raw.get("key_env", "ROSTER_BACKEND_KEY")),
        timeout=_non_negative_float(backend_raw, "timeout", 30.0),
    )

    return GlobalConfig(
        ui_title=str(raw.get("ui_title", "Student Roster")),
        rows_per_page=_positive_int(raw, "rows_per_page", 20),
        fetch_page_size=_positive_int(raw, "fetch_page_size", 500),
        default_status=default_status,
        default_sort=default_sort,
        visible_columns=visible,
        records_stale_seconds=_non_negative_float(raw, "records_stale_seconds", 60.0),
        reference_stale_seconds=_non_negative_float(raw, "reference_stale_seconds", 300.0),
        edit_statuses=tuple(raw.get("edit_statuses") or STATUS_CHOICES),
        backend=backend,
        config_root=root,
    )


def apply_env_overrides(cfg: GlobalConfig, env: Optional[Mapping[str, str]] = None) -> GlobalConfig:
    """
    ROSTER_BACKEND_URL replaces backend.url; the API key is read from the
    variable named by backend.key_env.
    """
    env = os.environ if env is None else env
    backend = cfg.backend
    url = env.get("ROSTER_BACKEND_URL") or backend.url
    api_key = env.get(backend.key_env) or None
    return replace(cfg, backend=replace(backend, url=url, api_key=api_key))


def load_global_config(root: Path, env: Optional[Mapping[str, str]] = None) -> GlobalConfig:
    """
    Load configuration from a directory.

    Expected structure:

        root/
            global.json

    :param root: Directory containing 'global.json'.
    :return: A GlobalConfig with environment overrides applied.
    :raises FileNotFoundError: if global.json does not exist.
    :raises ConfigError: if it is not valid JSON or holds invalid values.
    """
    root = Path(root)
    logger.info("Loading global config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    if not global_path.is_file():
        raise FileNotFoundError(f"File not found at {global_path}")

    try:
        with global_path.open() as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {global_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{global_path} must contain a JSON object")

    cfg = apply_env_overrides(parse_global_config(raw, root=root), env)
    if not cfg.backend.url:
        logger.warning("No backend url configured", extra={"config_root": str(root)})
    return cfg
