"""Tests for document upload metadata and content export."""

from datetime import date

import pytest

from lexflow.core.exceptions import DocumentContentError
from lexflow.services.documents import (
    document_from_upload,
    export_content,
    file_type_from_name,
    format_size,
    parse_tags,
)
from tests.conftest import make_document


class TestUploadMetadata:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("order.pdf", "PDF"), ("scan.final.JpG", "JPG"), ("README", "FILE")],
    )
    def test_file_type_from_name(self, name: str, expected: str):
        assert file_type_from_name(name) == expected

    def test_format_size(self):
        assert format_size(1_258_291) == "1.20 MB"
        assert format_size(0) == "0.00 MB"

    def test_parse_tags(self):
        assert parse_tags("Evidence, Legal ,, ") == ("Evidence", "Legal")
        assert parse_tags(["a", " "]) == ("a",)

    def test_document_from_upload(self):
        fields = document_from_upload(
            "Bail_Application.docx",
            2 * 1024 * 1024,
            tags="Draft,Bail",
            case_id="101",
            today=date(2024, 3, 1),
        )
        assert fields == {
            "name": "Bail_Application.docx",
            "file_type": "DOCX",
            "size": "2.00 MB",
            "upload_date": "2024-03-01",
            "tags": ("Draft", "Bail"),
            "case_id": "101",
        }


class TestExportContent:
    def test_exports_stored_html(self):
        doc = make_document(content="<p>Vakalatnama</p>")
        assert export_content(doc) == b"<p>Vakalatnama</p>"

    def test_metadata_only_document_rejected(self):
        with pytest.raises(DocumentContentError) as exc_info:
            export_content(make_document(content=None))
        assert exc_info.value.details == {"document_id": "d1"}
