"""Core domain models and enumerations.

These are the canonical record shapes held by the Record Store. Every
model is frozen: an update produces a new instance rather than mutating
the old one, so readers of a collection snapshot never see a torn record.

Attribute names are snake_case; the camelCase aliases are the names the
local store persists collections under.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from lexflow.core.exceptions import UnknownFieldError

NOT_SCHEDULED = "-"
"""Hearing-date sentinel meaning no hearing is scheduled."""

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ClientCategory(StrEnum):
    INDIVIDUAL = "Individual"
    CORPORATE = "Corporate"


class ClientStatus(StrEnum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class CaseStatus(StrEnum):
    """Lifecycle status of a case."""

    OPEN = "Open"
    CLOSED = "Closed"
    PENDING = "Pending"
    APPEAL = "On Appeal"


class TaskPriority(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class TaskStatus(StrEnum):
    """Kanban column a task sits in."""

    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Record(BaseModel):
    """Shared configuration for every stored record."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str


class Client(Record):
    name: str
    email: str = ""
    phone: str = ""
    category: ClientCategory = Field(default=ClientCategory.INDIVIDUAL, alias="type")
    status: ClientStatus = ClientStatus.ACTIVE
    last_contact: str = ""


class HearingEntry(Record):
    """One row of a case's hearing history. Never edited once appended."""

    date: str
    purpose: str = ""
    next_hearing_date: str = ""
    notes: str = ""


class Case(Record):
    """A matter handled for a client.

    ``client_name`` is copied from the client when the case is written and
    is not refreshed if the client is later renamed.
    """

    case_number: str
    title: str
    client_id: str = ""
    client_name: str = ""
    court: str = ""
    case_type: str = Field(default="", alias="type")
    status: CaseStatus = CaseStatus.OPEN
    next_hearing: str = NOT_SCHEDULED
    judge: str | None = None
    register_date: str | None = None
    first_party: str | None = None
    opposite_party: str | None = None
    cnr_number: str | None = None
    court_type: str | None = None
    court_name: str | None = None
    court_number: str | None = None
    act_section: str | None = None
    fir_number: str | None = None
    police_station: str | None = None
    notes: str | None = None
    total_fees: str | None = None
    is_disposed: bool | None = None
    workplace: str | None = None
    hearing_history: tuple[HearingEntry, ...] = ()
    google_calendar_event_id: str | None = None

    @property
    def hearing_scheduled(self) -> bool:
        return bool(self.next_hearing) and self.next_hearing != NOT_SCHEDULED

    def append_hearing(self, entry: HearingEntry) -> tuple[HearingEntry, ...]:
        """Return the hearing history with ``entry`` appended.

        The result is meant to be passed as ``hearing_history`` in an update;
        existing entries are carried over untouched.
        """
        return (*self.hearing_history, entry)


class Task(Record):
    title: str
    case_id: str | None = None
    client_id: str | None = None
    due_date: str = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    assignee: str = ""
    workplace: str | None = None
    deadline: str | None = None
    working_day: str | None = None
    google_calendar_event_id: str | None = None

    @property
    def calendar_date(self) -> str | None:
        """The date mirrored to the calendar: deadline, else due date."""
        return self.deadline or self.due_date or None


class LegalDocument(Record):
    name: str
    file_type: str = Field(default="FILE", alias="type")
    size: str = ""
    upload_date: str = ""
    case_id: str | None = None
    client_id: str | None = None
    tags: tuple[str, ...] = ()
    content: str | None = None
    font: str | None = None


# ---------------------------------------------------------------------------
# Partial-field validation
# ---------------------------------------------------------------------------


@lru_cache(maxsize=None)
def _field_adapter(model: type[Record], name: str) -> TypeAdapter[Any]:
    return TypeAdapter(model.model_fields[name].annotation)


def validate_partial(model: type[Record], fields: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a partial field set against ``model`` without touching other fields.

    Keys may be attribute names or their aliases; the result is keyed by
    attribute name. Raises UnknownFieldError for names the model lacks and
    pydantic's ValidationError for bad values.
    """
    by_alias = {field.alias: name for name, field in model.model_fields.items() if field.alias}
    validated: dict[str, Any] = {}
    for key, value in fields.items():
        name = key if key in model.model_fields else by_alias.get(key)
        if name is None:
            msg = f"{model.__name__} has no field {key!r}"
            raise UnknownFieldError(msg, details={"model": model.__name__, "field": key})
        validated[name] = _field_adapter(model, name).validate_python(value)
    return validated
