from __future__ import annotations

import re
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, Optional, Tuple

ALL = "all"

AXES: Tuple[str, ...] = (
    "status",
    "branch",
    "program",
    "payment_status",
    "admission_window",
)

# Changing the key axis resets these axes to ALL, so the user can never
# end up holding e.g. a program that does not exist in the chosen branch.
DEPENDENT_AXES: Dict[str, Tuple[str, ...]] = {
    "status": ("branch", "program", "payment_status"),
    "branch": ("program", "payment_status"),
}

STATUS_CHOICES = ("active", "inactive", "hold")
PAYMENT_CHOICES = ("paid", "unpaid")
ADMISSION_WINDOWS = ("last7Days", "last30Days", "last60Days")

_WINDOW_RE = re.compile(r"^last(\d+)Days$")


def window_days(window: str) -> Optional[int]:
    """
    Number of days in an admission window such as "last30Days".
    Returns None for ALL.
    """
    if window == ALL:
        return None
    match = _WINDOW_RE.match(window or "")
    if match is None:
        raise ValueError(f"Unknown admission window '{window}'")
    return int(match.group(1))


@dataclass(frozen=True)
class FilterCriteria:
    """
    Represents the current per-axis filters of the student table.

    Fields:

    - status: student status ("active", "inactive", "hold") or ALL
    - branch: branch id or ALL
    - program: program name or ALL
    - payment_status: "paid" / "unpaid" or ALL
    - admission_window: "lastNDays" or ALL

    Axes are combined with AND. Use `with_axis` to change a single axis so
    dependent axes are reset.
    """
    status: str = "active"
    branch: str = ALL
    program: str = ALL
    payment_status: str = ALL
    admission_window: str = ALL

    def __post_init__(self) -> None:
        window_days(self.admission_window)

    def with_axis(self, axis: str, value: Optional[str]) -> FilterCriteria:
        if axis not in AXES:
            raise KeyError(f"Unknown filter axis '{axis}'")
        value = ALL if value in (None, "") else str(value)
        if getattr(self, axis) == value:
            return self

        changes: Dict[str, str] = {axis: value}
        for dependent in DEPENDENT_AXES.get(axis, ()):
            changes[dependent] = ALL
        return replace(self, **changes)

    def is_wildcard(self, axis: str) -> bool:
        return getattr(self, axis) == ALL

    def relaxed(self, axis: str) -> FilterCriteria:
        """Same criteria with one axis set to ALL (dependents untouched)."""
        return replace(self, **{axis: ALL})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], default_status: str = "active") -> FilterCriteria:
        data = data or {}
        return cls(
            status=str(data.get("status") or default_status),
            branch=str(data.get("branch") or ALL),
            program=str(data.get("program") or ALL),
            payment_status=str(data.get("payment_status") or ALL),
            admission_window=str(data.get("admission_window") or ALL),
        )
