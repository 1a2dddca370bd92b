from __future__ import annotations

import json
from pathlib import Path

import pytest

from roster_browser.config.loader import load_global_config, parse_global_config
from roster_browser.core.exceptions import ConfigError
from roster_browser.core.sorting import DESCENDING


def _write_config(root: Path, data) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    path = root / "global.json"
    path.write_text(json.dumps(data))
    return path


def test_load_global_config_reads_values_and_env(tmp_path: Path):
    config_root = tmp_path / "config"
    _write_config(
        config_root,
        {
            "ui_title": "Roster",
            "rows_per_page": 25,
            "default_status": "all",
            "default_sort": {"column": "admission_date", "direction": "descending"},
            "backend": {"url": "http://db.local", "key_env": "MY_KEY"},
        },
    )

    cfg = load_global_config(config_root, env={"MY_KEY": "k-123"})

    assert cfg.ui_title == "Roster"
    assert cfg.rows_per_page == 25
    assert cfg.fetch_page_size == 500
    assert cfg.default_status == "all"
    assert cfg.default_sort.column == "admission_date"
    assert cfg.default_sort.direction == DESCENDING
    assert cfg.backend.url == "http://db.local"
    assert cfg.backend.api_key == "k-123"
    assert cfg.config_root == config_root


def test_env_url_overrides_file(tmp_path: Path):
    _write_config(tmp_path, {"backend": {"url": "http://file"}})

    cfg = load_global_config(tmp_path, env={"ROSTER_BACKEND_URL": "http://env"})

    assert cfg.backend.url == "http://env"
    assert cfg.backend.api_key is None


def test_missing_global_json_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_global_config(tmp_path, env={})


def test_invalid_json_raises_config_error(tmp_path: Path):
    (tmp_path / "global.json").write_text("{not json")

    with pytest.raises(ConfigError):
        load_global_config(tmp_path, env={})


def test_non_object_raises_config_error(tmp_path: Path):
    _write_config(tmp_path, ["a", "b"])

    with pytest.raises(ConfigError):
        load_global_config(tmp_path, env={})


@pytest.mark.parametrize(
    "raw",
    [
        {"rows_per_page": 0},
        {"fetch_page_size": "500"},
        {"default_status": "graduated"},
        {"default_sort": {"direction": "up"}},
        {"visible_columns": ["name", "shoe_size"]},
        {"records_stale_seconds": -1},
    ],
)
def test_invalid_values_raise_config_error(raw):
    with pytest.raises(ConfigError):
        parse_global_config(raw)


def test_shipped_config_is_valid():
    root = Path(__file__).resolve().parents[3] / "config"

    cfg = load_global_config(root, env={})

    assert cfg.rows_per_page == 20
    assert cfg.backend.key_env == "ROSTER_BACKEND_KEY"
