from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from roster_browser.core.exceptions import FetchError, MutationError
from roster_browser.core.records import (
    Record,
    ReferenceCollection,
    normalise_student,
    record_id,
)
from roster_browser.services.rpc_client import RpcClient

logger = logging.getLogger(__name__)

STUDENTS_RPC = "get_all_student_with_programs_offset"
DELETE_RPC = "delete_student"
UPDATE_RPC = "update_student"

REFERENCE_RPCS: Dict[str, str] = {
    "branches": "get_all_branches",
    "programs": "get_all_programs",
}

# record field -> update_student parameter
UPDATE_FIELDS: Dict[str, str] = {
    "first_name": "_first_name",
    "last_name": "_last_name",
    "gender": "_gender",
    "date_of_birth": "_date_of_birth",
    "place_of_birth": "_place_of_birth",
    "nationality": "_nationality",
    "mother_name": "_mother_name",
    "mother_occupation": "_mother_occupation",
    "father_name": "_father_name",
    "father_occupation": "_father_occupation",
    "address": "_address",
    "parent_contact": "_parent_contact",
    "phone": "_phone",
    "email": "_email",
    "branch_id": "_branch",
    "status": "_status",
    "admission_date": "_admission_date",
    "image_url": "_image_url",
    "insurance_number": "_insurance_number",
    "insurance_expiry": "_insurance_expiry",
    "modified_by": "_modified_by",
    "programs": "_program_ids",
}


class DataSourceAdapter:
    """
    Reads students and reference collections from the backend.

    The students RPC is capped per call, so `fetch_all` keeps requesting
    successive offsets until a short page arrives. Callers only ever see
    the complete collection or a FetchError.
    """

    def __init__(
            self,
            client: RpcClient,
            page_size: int = 500,
            max_pages: int = 1000,
    ):
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.client = client
        self.page_size = page_size
        self.max_pages = max_pages

    def fetch_all(self, params: Optional[Mapping[str, Any]] = None) -> List[Record]:
        params = dict(params or {})
        base = {
            "p_status": params.get("status"),
            "p_branch_id": params.get("branch_id"),
        }

        rows: List[Record] = []
        offset = 0
        for n_page in range(self.max_pages):
            response = self.client.call(
                STUDENTS_RPC,
                {"p_limit": self.page_size, "p_offset": offset, **base},
            )
            if not response.ok:
                logger.error(
                    "Student page failed; discarding partial result",
                    extra={"offset": offset, "n_rows_discarded": len(rows), "error": response.error},
                )
                raise FetchError(response.error)

            chunk = response.data or []
            if not isinstance(chunk, list):
                raise FetchError(f"{STUDENTS_RPC} returned {type(chunk).__name__}, expected a list")
            rows.extend(chunk)

            if len(chunk) < self.page_size:
                logger.info(
                    "Students loaded",
                    extra={"n_students": len(rows), "n_pages": n_page + 1},
                )
                return [normalise_student(r) for r in rows]
            offset += len(chunk)

        raise FetchError(f"{STUDENTS_RPC} did not finish after {self.max_pages} pages")

    def fetch_reference(self, kind: str) -> ReferenceCollection:
        try:
            function = REFERENCE_RPCS[kind]
        except KeyError:
            raise KeyError(f"Unknown reference collection '{kind}'") from None

        response = self.client.call(function)
        if not response.ok:
            raise FetchError(response.error)

        collection = ReferenceCollection.from_rows(kind, response.data or [])
        logger.info("Reference loaded", extra={"kind": kind, "n_rows": len(collection)})
        return collection

    def delete(self, rid: Any) -> None:
        response = self.client.call(DELETE_RPC, {"_id": str(rid)})
        if not response.ok:
            raise MutationError(response.error)
        logger.info("Student deleted", extra={"student_id": str(rid)})

    def update(self, record: Mapping[str, Any], changes: Mapping[str, Any]) -> None:
        payload = update_payload(record, changes)
        response = self.client.call(UPDATE_RPC, payload)
        if not response.ok:
            raise MutationError(response.error)
        logger.info(
            "Student updated",
            extra={"student_id": payload["_id"], "fields": sorted(changes)},
        )


def update_payload(record: Mapping[str, Any], changes: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Full update_student parameter object: the stored values of the record
    with `changes` applied. Empty dates/ids are sent as null, empty text
    as "".
    """
    unknown = set(changes) - set(UPDATE_FIELDS)
    if unknown:
        raise KeyError(f"Fields cannot be updated: {sorted(unknown)}")

    merged = {**record, **changes}
    payload: Dict[str, Any] = {"_id": record_id(record)}
    for field, param in UPDATE_FIELDS.items():
        value = merged.get(field)
        if field == "programs":
            payload[param] = [str(v) for v in value or []]
        elif field in _NULLABLE_FIELDS:
            payload[param] = value or None
        else:
            payload[param] = "" if value is None else str(value)
    return payload


_NULLABLE_FIELDS = frozenset(
    {"date_of_birth", "admission_date", "insurance_expiry", "branch_id", "modified_by"}
)
