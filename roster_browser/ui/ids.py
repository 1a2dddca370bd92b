from __future__ import annotations

__all__ = ["IDs", "bulk_action_id"]


class IDs:
    class Store:
        FILTER_STATE = "filter-state"
        SORT_STATE = "sort-state"
        PAGE_STATE = "page-state"
        SELECTION_STATE = "selection-state"
        DATA_VERSION = "data-version"

    class Control:
        # Search + filters
        SEARCH_INPUT = "search-input"
        STATUS_FILTER = "status-filter"
        BRANCH_FILTER = "branch-filter"
        PROGRAM_FILTER = "program-filter"
        PAYMENT_FILTER = "payment-filter"
        ADMISSION_FILTER = "admission-filter"

        # Sort + columns
        SORT_COLUMN = "sort-column-select"
        SORT_DIRECTION_BTN = "sort-direction-btn"
        VISIBLE_COLUMNS = "visible-columns-checklist"

        # Table + paging
        STUDENT_TABLE = "student-table"
        PAGINATION = "table-pagination"
        PAGE_JUMP_INPUT = "page-jump-input"
        ROW_COUNT = "row-count-text"
        STATUS_GRAPH = "status-graph"
        REFRESH_BTN = "refresh-btn"
        LOAD_ALERT = "load-alert"

        # Selection + bulk actions
        SELECTION_COUNT = "selection-count"
        SELECT_ALL_BTN = "select-all-btn"
        CLEAR_SELECTION_BTN = "clear-selection-btn"
        BULK_MENU = "bulk-action-menu"
        BULK_ALERT = "bulk-alert"

        # Row actions
        VIEW_BTN = "row-view-btn"
        EDIT_BTN = "row-edit-btn"
        DELETE_BTN = "row-delete-btn"
        DELETE_CONFIRM = "row-delete-confirm"
        ROW_ALERT = "row-alert"

        VIEW_MODAL = "view-modal"
        VIEW_MODAL_BODY = "view-modal-body"

        EDIT_MODAL = "edit-modal"
        EDIT_FIRST_NAME = "edit-first-name"
        EDIT_LAST_NAME = "edit-last-name"
        EDIT_PHONE = "edit-phone"
        EDIT_EMAIL = "edit-email"
        EDIT_STATUS = "edit-status"
        EDIT_SAVE_BTN = "edit-save-btn"
        EDIT_ERROR = "edit-error"

    class Pattern:
        # pattern-matching "type" strings
        BULK_ACTION = "bulk-action"


def bulk_action_id(action_key: str) -> dict:
    return {"type": IDs.Pattern.BULK_ACTION, "index": action_key}
