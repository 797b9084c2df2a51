"""Translation between remote table rows and in-memory records.

Each RowMapper is a pure, structural translation driven by an explicit
attribute-to-column table. No validation happens here: ``from_remote_row``
builds records with ``model_construct`` so whatever the backend returned
is carried into the record as-is, and ``to_remote_row`` only emits the
columns for keys that are actually present in its input.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from lexflow.models.domain import Case, Client, HearingEntry, LegalDocument, Record, Task

RecordT = TypeVar("RecordT", bound=Record)


def _to_wire(value: Any) -> Any:
    if isinstance(value, StrEnum):
        return value.value
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (tuple, list)):
        return [_to_wire(item) for item in value]
    return value


def _present_fields(partial: Record | Mapping[str, Any]) -> dict[str, Any]:
    """Keys present in ``partial``. For a full record, unset (None) fields are absent."""
    if isinstance(partial, BaseModel):
        return {
            name: getattr(partial, name)
            for name in type(partial).model_fields
            if getattr(partial, name, None) is not None
        }
    return dict(partial)


def _coerce_enum(annotation: Any, value: Any) -> Any:
    if isinstance(annotation, type) and issubclass(annotation, StrEnum) and isinstance(value, str):
        try:
            return annotation(value)
        except ValueError:
            return value
    return value


def _hearing_from_wire(raw: Any) -> Any:
    if not isinstance(raw, Mapping):
        return raw
    kwargs: dict[str, Any] = {}
    for name, field in HearingEntry.model_fields.items():
        key = field.alias or name
        if key in raw:
            kwargs[key] = raw[key]
        elif name in raw:
            kwargs[key] = raw[name]
    return HearingEntry.model_construct(**kwargs)


@dataclass(frozen=True)
class RowMapper(Generic[RecordT]):
    """Bidirectional field-name translation for one remote table."""

    model: type[RecordT]
    table: str
    columns: Mapping[str, str]

    def column_for(self, attribute: str) -> str | None:
        return self.columns.get(attribute)

    def to_remote_row(self, partial: RecordT | Mapping[str, Any]) -> dict[str, Any]:
        """Map a record or partial field mapping to remote column names."""
        row: dict[str, Any] = {}
        for attribute, value in _present_fields(partial).items():
            column = self.columns.get(attribute)
            if column is None:
                continue
            row[column] = _to_wire(value)
        return row

    def from_remote_row(self, row: Mapping[str, Any]) -> RecordT:
        """Build a record from any row the backend returns. Never raises on bad data."""
        kwargs: dict[str, Any] = {}
        for attribute, field in self.model.model_fields.items():
            column = self.columns.get(attribute)
            if column is None or column not in row:
                # model_construct leaves required fields unset; absent columns read as None.
                if field.is_required():
                    kwargs[field.alias or attribute] = None
                continue
            value = row[column]
            if attribute == "id" and value is not None:
                value = str(value)
            elif attribute == "hearing_history":
                value = tuple(_hearing_from_wire(item) for item in value or ())
            elif attribute == "tags":
                value = tuple(value or ())
            else:
                value = _coerce_enum(field.annotation, value)
            kwargs[field.alias or attribute] = value
        return self.model.model_construct(**kwargs)


# ---------------------------------------------------------------------------
# Per-table mappers
# ---------------------------------------------------------------------------

CLIENT_MAPPER: RowMapper[Client] = RowMapper(
    model=Client,
    table="clients",
    columns={
        "id": "id",
        "name": "name",
        "email": "email",
        "phone": "phone",
        "category": "type",
        "status": "status",
        "last_contact": "last_contact",
    },
)

CASE_MAPPER: RowMapper[Case] = RowMapper(
    model=Case,
    table="cases",
    columns={
        "id": "id",
        "case_number": "case_number",
        "title": "title",
        "client_id": "client_id",
        "client_name": "client_name",
        "court": "court",
        "case_type": "type",
        "status": "status",
        "next_hearing": "next_hearing",
        "judge": "judge",
        "register_date": "register_date",
        "first_party": "first_party",
        "opposite_party": "opposite_party",
        "cnr_number": "cnr_number",
        "court_type": "court_type",
        "court_name": "court_name",
        "court_number": "court_number",
        "act_section": "act_section",
        "fir_number": "fir_number",
        "police_station": "police_station",
        "notes": "notes",
        "total_fees": "total_fees",
        "is_disposed": "is_disposed",
        "workplace": "workplace",
        "hearing_history": "hearing_history",
        "google_calendar_event_id": "google_calendar_event_id",
    },
)

TASK_MAPPER: RowMapper[Task] = RowMapper(
    model=Task,
    table="tasks",
    columns={
        "id": "id",
        "title": "title",
        "case_id": "case_id",
        "client_id": "client_id",
        "due_date": "due_date",
        "priority": "priority",
        "status": "status",
        "assignee": "assignee",
        "workplace": "workplace",
        "deadline": "deadline",
        "working_day": "working_day",
        "google_calendar_event_id": "google_calendar_event_id",
    },
)

DOCUMENT_MAPPER: RowMapper[LegalDocument] = RowMapper(
    model=LegalDocument,
    table="documents",
    columns={
        "id": "id",
        "name": "name",
        "file_type": "type",
        "size": "size",
        "upload_date": "upload_date",
        "case_id": "case_id",
        "client_id": "client_id",
        "tags": "tags",
        "content": "content",
        "font": "font",
    },
)
