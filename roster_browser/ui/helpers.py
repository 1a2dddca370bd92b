from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objs as go
from dash import html

from roster_browser.core.filter_state import ALL, PAYMENT_CHOICES, STATUS_CHOICES
from roster_browser.core.records import ID_FIELD, Record
from roster_browser.core.selection import SelectionTracker
from roster_browser.core.table_view import COLUMNS, TableView, TableViewState
from roster_browser.ui.callbacks.callbacks_utils import parse_page, safe_filter_criteria, safe_sort

DATE_COLUMNS = ("date_of_birth", "admission_date", "insurance_expiry", "created_at", "updated_at")
DATE_FORMAT = "%B %d, %Y"

ADMISSION_LABELS = {
    ALL: "All",
    "last7Days": "Last 7 days",
    "last30Days": "Last 30 days",
    "last60Days": "Last 60 days",
}

DETAIL_FIELDS = (
    ("full_name", "Name"),
    ("gender_display", "Gender"),
    ("date_of_birth", "Date of birth"),
    ("place_of_birth", "Place of birth"),
    ("nationality", "Nationality"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("parent_contact", "Parent contact"),
    ("mother_name", "Mother"),
    ("father_name", "Father"),
    ("address", "Address"),
    ("branch_name", "Branch"),
    ("program_names", "Programs"),
    ("status", "Status"),
    ("payment_status", "Payment"),
    ("admission_date", "Admission date"),
    ("insurance_number", "Insurance ID"),
    ("insurance_expiry", "Insurance expiry"),
)


def view_state_from_stores(
        filter_data: Optional[dict],
        search: Optional[str],
        sort_data: Optional[dict],
        page: Optional[int],
        page_size: int,
        visible_columns: Optional[Sequence[str]] = None,
        default_status: str = "active",
) -> TableViewState:
    """Rebuild the view state from raw store values; corrupt stores fall back to defaults."""
    return TableViewState(
        criteria=safe_filter_criteria(filter_data, default_status),
        search=(search or "").strip(),
        sort=safe_sort(sort_data),
        page=parse_page(page) or 1,
        page_size=page_size,
        visible_columns=tuple(visible_columns or ()),
    )


# ---------------------------------------------------------------------------
# Filter options
# ---------------------------------------------------------------------------
def _with_count(label: str, count: int) -> str:
    return f"{label} ({count})"


def filter_options(view: TableView) -> Dict[str, List[dict]]:
    """Radio options for every filter axis, labelled with their counts."""
    counts = view.facet_counts

    status = [{"label": _with_count("All", counts["status"][ALL]), "value": ALL}]
    status += [
        {"label": _with_count(s.capitalize(), counts["status"][s]), "value": s}
        for s in STATUS_CHOICES
    ]

    branch = [
        {"label": _with_count(b["name"], counts["branch"].get(b["id"], 0)), "value": b["id"]}
        for b in view.branch_options
    ]

    program = [{"label": _with_count("All", counts["program"][ALL]), "value": ALL}]
    program += [
        {"label": _with_count(p, counts["program"].get(p, 0)), "value": p}
        for p in view.program_options
    ]

    payment = [{"label": _with_count("All", counts["payment_status"][ALL]), "value": ALL}]
    payment += [
        {"label": _with_count(p.capitalize(), counts["payment_status"][p]), "value": p}
        for p in PAYMENT_CHOICES
    ]

    admission = [
        {"label": _with_count(label, counts["admission_window"][value]), "value": value}
        for value, label in ADMISSION_LABELS.items()
    ]

    return {
        "status": status,
        "branch": branch,
        "program": program,
        "payment_status": payment,
        "admission_window": admission,
    }


# ---------------------------------------------------------------------------
# Table rendering
# ---------------------------------------------------------------------------
def table_columns(visible: Sequence[str]) -> List[dict]:
    wanted = set(visible)
    return [{"name": label, "id": cid} for cid, label in COLUMNS if cid in wanted]


def table_rows(records: Sequence[Record]) -> List[dict]:
    """
    Display rows for the DataTable. Every row carries "id" so active_cell
    reports the record id as row_id.
    """
    if not records:
        return []

    df = pd.DataFrame.from_records(list(records))
    rows = pd.DataFrame({ID_FIELD: df[ID_FIELD].astype(str)})

    def col(name: str) -> pd.Series:
        if name in df.columns:
            return df[name]
        return pd.Series([None] * len(df), index=df.index)

    rows["name"] = col("full_name").fillna("")
    rows["gender"] = col("gender_display").fillna("Unknown")
    rows["nationality"] = col("nationality").fillna("")
    rows["phone"] = col("phone").fillna("").astype(str).str.replace(r"[-\s]", "", regex=True)
    rows["branch"] = col("branch_name").fillna("").replace("", "Unknown")
    rows["program"] = col("program_names").map(
        lambda names: ", ".join(names) if isinstance(names, list) and names else "No Program"
    )
    rows["status"] = col("status").fillna("").astype(str).str.capitalize()
    rows["payment_status"] = col("payment_status").fillna("").replace("", "Unknown")
    rows["insurance_number"] = col("insurance_number").fillna("")

    for name in DATE_COLUMNS:
        parsed = pd.to_datetime(col(name), errors="coerce", utc=True, format="mixed")
        rows[name] = parsed.dt.strftime(DATE_FORMAT).fillna("")

    return rows.to_dict("records")


def selection_summary(tracker: SelectionTracker, filtered_ids: Sequence[str]) -> str:
    n = tracker.count(filtered_ids)
    if tracker.is_all:
        return f"All {n} selected"
    return f"{n} selected"


def status_figure(records: Sequence[Record]) -> go.Figure:
    """Students per status in the current filtered view."""
    if not records:
        fig = go.Figure()
        fig.update_layout(
            annotations=[dict(text="No students", showarrow=False, x=0.5, y=0.5,
                              xref="paper", yref="paper")],
            xaxis={"visible": False},
            yaxis={"visible": False},
        )
        return fig

    statuses = pd.Series([str(r.get("status") or "unknown").lower() for r in records])
    counts = statuses.value_counts().rename_axis("status").reset_index(name="students")
    fig = px.bar(counts, x="status", y="students", color="status", text="students")
    fig.update_layout(showlegend=False, margin=dict(l=10, r=10, t=10, b=10), height=220)
    return fig


def _detail_value(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value) or "-"
    if value is None or value == "":
        return "-"
    return str(value)


def record_details(record: Optional[Mapping[str, Any]]) -> html.Div:
    if record is None:
        return html.Div("Student not found. It may have been removed.", className="text-muted")
    return html.Div(
        [
            html.Dl(
                [
                    item
                    for key, label in DETAIL_FIELDS
                    for item in (
                        html.Dt(label, className="col-sm-4"),
                        html.Dd(_detail_value(record.get(key)), className="col-sm-8"),
                    )
                ],
                className="row",
            )
        ]
    )
