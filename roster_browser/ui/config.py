from dataclasses import dataclass, field
from typing import Dict, List, Optional

from roster_browser.config.model import GlobalConfig
from roster_browser.services.bulk_actions import MARK_PAID, MARK_UNPAID, BulkAction
from roster_browser.services.table_service import StudentTableService


@dataclass
class AppConfig:
    """
    Shared state for the Dash app, passed into layout + callback
    registration instead of module-level globals.
    """
    global_config: GlobalConfig
    service: Optional[StudentTableService] = None
    bulk_actions: Dict[str, BulkAction] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.bulk_actions:
            actions: List[BulkAction] = [MARK_PAID, MARK_UNPAID]
            self.bulk_actions = {a.key: a for a in actions}

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.service is None:
            raise RuntimeError("AppConfig.service must be initialized.")
