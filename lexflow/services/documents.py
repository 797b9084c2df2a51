"""Helpers for document uploads and exports."""

from __future__ import annotations

from datetime import date
from pathlib import PurePath
from typing import TYPE_CHECKING, Any

from lexflow.core.exceptions import DocumentContentError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lexflow.models.domain import LegalDocument


def file_type_from_name(name: str) -> str:
    """Upper-cased extension of ``name``, or ``FILE`` when it has none."""
    suffix = PurePath(name).suffix.lstrip(".")
    return suffix.upper() or "FILE"


def format_size(num_bytes: int) -> str:
    """Human-readable size in megabytes, e.g. ``"1.20 MB"``."""
    return f"{num_bytes / 1024 / 1024:.2f} MB"


def parse_tags(raw: str | Iterable[str]) -> tuple[str, ...]:
    """Split a comma-separated tag string; blank tags are dropped."""
    parts = raw.split(",") if isinstance(raw, str) else raw
    return tuple(tag.strip() for tag in parts if tag.strip())


def document_from_upload(
    name: str,
    num_bytes: int,
    *,
    tags: str | Iterable[str] = (),
    case_id: str | None = None,
    client_id: str | None = None,
    content: str | None = None,
    font: str | None = None,
    today: date | None = None,
) -> dict[str, Any]:
    """Field mapping for ``DataContext.add_document`` describing an uploaded file."""
    fields: dict[str, Any] = {
        "name": name,
        "file_type": file_type_from_name(name),
        "size": format_size(num_bytes),
        "upload_date": (today or date.today()).isoformat(),
        "tags": parse_tags(tags),
    }
    optional = {"case_id": case_id, "client_id": client_id, "content": content, "font": font}
    fields.update({key: value for key, value in optional.items() if value is not None})
    return fields


def export_content(doc: LegalDocument) -> bytes:
    """Stored content of a document authored in the editor, as UTF-8 HTML."""
    if not doc.content:
        msg = (
            f"{doc.name} was uploaded as metadata only and has no stored content; "
            "use the editor for downloadable files"
        )
        raise DocumentContentError(msg, details={"document_id": doc.id})
    return doc.content.encode("utf-8")
