from docmigration.classification.models import STATUS_ERROR
from docmigration.registry.models import Document
from docmigration.state.codec import BOM
from docmigration.state.export import EXPORT_HEADERS, encode_export, export_row


def _make_document() -> Document:
    return Document(
        id="doc-1",
        name="Visit",
        url="https://docs.google.com/document/d/doc-1/edit",
        created="2025-03-01T09:00:00.000Z",
        modified="2025-03-05T10:30:00.000Z",
        person_name="Dana Levi",
        national_id="",
        appointment_date="05 Mar 2025",
        missing_fields=("nationalId",),
        errors=("first problem", "second problem"),
        status=STATUS_ERROR,
    )


class TestExportRow:
    def test_maps_columns(self) -> None:
        row = export_row(_make_document(), tag="#batch")

        assert list(row) == list(EXPORT_HEADERS)
        assert row["Item Name"] == "Dana Levi -  - 05 Mar 2025"
        assert row["Tag"] == "#batch"
        assert row["Errors"] == "first problem, second problem"
        assert row["Missing Fields"] == "nationalId"


class TestEncodeExport:
    def test_header_and_quoted_rows(self) -> None:
        text = encode_export([_make_document()])

        header, row = text.removeprefix(BOM).split("\n")
        assert text.startswith(BOM)
        assert header.split(",") == list(EXPORT_HEADERS)
        assert row.startswith('"Dana Levi -  - 05 Mar 2025","doc-1","Visit","Dana Levi",""')
        assert '"#mass.import"' in row

    def test_empty_export_is_header_only(self) -> None:
        assert encode_export([]) == BOM + ",".join(EXPORT_HEADERS)
