from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from roster_browser.core.filter_state import STATUS_CHOICES
from roster_browser.core.sorting import SortDescriptor
from roster_browser.core.table_view import INITIAL_VISIBLE_COLUMNS


@dataclass(frozen=True)
class BackendConfig:
    """
    Where the RPC backend lives. The key itself is read from the
    environment variable named by `key_env`, never from the config file.
    """
    url: str = ""
    key_env: str = "ROSTER_BACKEND_KEY"
    api_key: Optional[str] = field(default=None, repr=False)
    timeout: float = 30.0


@dataclass(frozen=True)
class GlobalConfig:
    ui_title: str = "Student Roster"
    rows_per_page: int = 20
    fetch_page_size: int = 500
    default_status: str = "active"
    default_sort: SortDescriptor = field(default_factory=SortDescriptor)
    visible_columns: Tuple[str, ...] = INITIAL_VISIBLE_COLUMNS
    records_stale_seconds: float = 60.0
    reference_stale_seconds: float = 300.0
    edit_statuses: Tuple[str, ...] = STATUS_CHOICES
    backend: BackendConfig = field(default_factory=BackendConfig)
    config_root: Optional[Path] = None
