import pytest

from docmigration.classification.classifier import INVALID_NATIONAL_ID, MISSING_NATIONAL_ID
from docmigration.classification.models import STATUS_ERROR, STATUS_SUCCESS
from docmigration.registry.models import Document
from docmigration.registry.registry import DocumentRegistry
from docmigration.state.codec import BOM, STATE_HEADERS, decode, encode
from docmigration.state.exceptions import StateFormatError

HEADER_LINE = ",".join(STATE_HEADERS)


def _make_registry() -> DocumentRegistry:
    registry = DocumentRegistry()
    registry.ingest_found(
        [
            Document(id="a", name="Visit A", url="https://x/a", created="2025-03-01T09:00:00.000Z"),
            Document(id="b", name="Visit, \"B\"", url="https://x/b"),
        ]
    )
    registry.merge_processed(
        [
            Document(
                id="a",
                name="Visit A",
                person_name="Dana Levi",
                national_id="123456789",
                appointment_date="05 Mar 2025",
                status=STATUS_SUCCESS,
            ),
            Document(
                id="b",
                name="Visit, \"B\"",
                person_name="Avi",
                national_id="",
                missing_fields=("nationalId",),
                errors=(MISSING_NATIONAL_ID,),
                status=STATUS_ERROR,
            ),
        ]
    )
    registry.add_hidden([Document(id="h", name="Hidden note")])
    return registry


def _row(*cells: str) -> str:
    return ",".join(f'"{cell}"' for cell in cells)


class TestEncode:
    def test_starts_with_bom_and_header(self) -> None:
        text = encode(DocumentRegistry())

        assert text == BOM + HEADER_LINE

    def test_every_cell_is_quoted(self) -> None:
        lines = encode(_make_registry()).removeprefix(BOM).split("\n")

        assert lines[0] == HEADER_LINE
        assert lines[1].startswith('"found","a","Visit A","https://x/a"')
        assert all(line.startswith('"') and line.endswith('"') for line in lines[1:])

    def test_processed_row_joins_lists(self) -> None:
        text = encode(_make_registry())

        assert f'"nationalId","{MISSING_NATIONAL_ID}"' in text

    def test_no_trailing_newline(self) -> None:
        assert not encode(_make_registry()).endswith("\n")


class TestRoundTrip:
    def test_restores_every_bucket(self) -> None:
        original = _make_registry()

        restored = decode(encode(original))

        assert restored.counts() == {"found": 2, "processed": 2, "error": 1, "hidden": 1}
        assert restored.processed == original.processed
        assert restored.found == original.found
        assert [doc.id for doc in restored.errors] == ["b"]

    def test_quotes_and_commas_survive(self) -> None:
        restored = decode(encode(_make_registry()))

        assert restored.get("b").name == 'Visit, "B"'


class TestDecode:
    def test_header_only_file_is_an_empty_registry(self) -> None:
        assert decode(BOM + HEADER_LINE).is_empty

    @pytest.mark.parametrize("text", ["", BOM, "\n\n"])
    def test_empty_text_is_rejected(self, text: str) -> None:
        with pytest.raises(StateFormatError, match="empty"):
            decode(text)

    def test_missing_required_header_is_rejected(self) -> None:
        with pytest.raises(StateFormatError, match="documentType"):
            decode("id,name\n\"a\",\"b\"")

    def test_rows_with_wrong_field_count_are_skipped(self) -> None:
        text = "\n".join(
            [
                "documentType,id,name",
                _row("found", "a", "Visit A"),
                _row("found", "b"),
                _row("found", "c", "Visit C"),
            ]
        )

        registry = decode(text)

        assert [doc.id for doc in registry.found] == ["a", "c"]

    def test_unknown_types_are_skipped(self) -> None:
        text = "\n".join(["documentType,id,name", _row("archived", "a", "Visit A")])

        assert decode(text).is_empty

    def test_accepts_crlf_line_endings(self) -> None:
        text = "\r\n".join(["documentType,id,name", _row("hidden", "a", "Visit A")])

        assert [doc.id for doc in decode(text).hidden] == ["a"]

    def test_stored_missing_fields_keep_row_in_errors(self) -> None:
        text = "\n".join(
            [
                HEADER_LINE,
                _row("processed", "a", "Visit A", "", "", "", "Dana", "123456789",
                     "", "error", "personName;teudatZehut", ""),
            ]
        )

        registry = decode(text)

        assert registry.get("a").missing_fields == ("personName", "nationalId")
        assert registry.get("a").status == STATUS_ERROR
        assert registry.is_error("a")

    def test_stored_error_status_alone_keeps_row_in_errors(self) -> None:
        text = "\n".join(
            [
                HEADER_LINE,
                _row("processed", "a", "Visit A", "", "", "", "Dana", "123456789",
                     "05 Mar 2025", "error", "", ""),
            ]
        )

        registry = decode(text)

        assert registry.get("a").status == STATUS_ERROR
        assert [doc.id for doc in registry.errors] == ["a"]

    def test_stored_missing_date_survives_optional_date(self) -> None:
        text = "\n".join(
            [
                HEADER_LINE,
                _row("processed", "a", "Visit A", "", "", "", "Dana", "123456789",
                     "", "error", "appointmentDate", ""),
            ]
        )

        document = decode(text).get("a")

        assert document.missing_fields == ("appointmentDate",)
        assert document.status == STATUS_ERROR

    def test_recomputes_missing_fields_for_clean_rows(self) -> None:
        text = "\n".join(
            [
                HEADER_LINE,
                _row("processed", "a", "Visit A", "", "", "", "", "123456789",
                     "", "success", "", ""),
            ]
        )

        registry = decode(text)

        assert registry.get("a").missing_fields == ("personName",)
        assert registry.is_error("a")

    def test_success_row_stays_out_of_errors(self) -> None:
        text = "\n".join(
            [
                HEADER_LINE,
                _row("processed", "a", "Visit A", "", "", "", "Dana", "123456789",
                     "", "success", "", ""),
            ]
        )

        registry = decode(text)

        assert registry.get("a").status == STATUS_SUCCESS
        assert registry.errors == []

    def test_hidden_row_wins_over_found_row(self) -> None:
        text = "\n".join(
            [
                "documentType,id,name",
                _row("found", "a", "Visit A"),
                _row("hidden", "a", "Visit A"),
            ]
        )

        registry = decode(text)

        assert registry.found == []
        assert [doc.id for doc in registry.hidden] == ["a"]

    def test_keeps_stored_errors(self) -> None:
        text = "\n".join(
            [
                HEADER_LINE,
                _row("processed", "a", "Visit A", "", "", "", "Dana", "12345",
                     "", "", "", INVALID_NATIONAL_ID),
            ]
        )

        registry = decode(text)

        assert registry.get("a").errors == (INVALID_NATIONAL_ID,)
        assert registry.get("a").status == STATUS_ERROR
        assert registry.is_error("a")

    def test_legacy_error_rows_become_processed(self) -> None:
        text = "\n".join(
            [
                HEADER_LINE,
                _row("error", "a", "Visit A", "", "", "", "", "", "", "error",
                     "personName;teudatZehut", "Network down"),
            ]
        )

        registry = decode(text)

        assert [doc.id for doc in registry.processed] == ["a"]
        assert registry.get("a").missing_fields == ("personName", "nationalId")
        assert registry.is_error("a")

    def test_required_date_is_applied_on_load(self) -> None:
        text = "\n".join(
            [
                HEADER_LINE,
                _row("processed", "a", "Visit A", "", "", "", "Dana", "123456789",
                     "", "success", "", ""),
            ]
        )

        document = decode(text, require_appointment_date=True).get("a")

        assert document.missing_fields == ("appointmentDate",)
        assert document.status == STATUS_ERROR
