import pytest

from docmigration.extraction.extractor import extract_fields
from docmigration.extraction.models import ExtractedFields


class TestCompleteDocument:
    def test_extracts_all_fields(self, complete_text: str) -> None:
        result = extract_fields(complete_text)

        assert result == ExtractedFields(
            person_name="Dana Levi",
            national_id="123456789",
            appointment_date="05 Mar 2025",
        )

    def test_field_order_does_not_matter(self) -> None:
        text = "תאריך ביקור: 17/11/2025\nת.ז.: 987654321\nשם: Avi Cohen\n"

        result = extract_fields(text)

        assert result.person_name == "Avi Cohen"
        assert result.national_id == "987654321"
        assert result.appointment_date == "17 Nov 2025"

    def test_uses_first_occurrence_of_each_label(self) -> None:
        text = "שם: First Person\nשם: Second Person\nת.ז.: 111111111\nת.ז.: 222222222\n"

        result = extract_fields(text)

        assert result.person_name == "First Person"
        assert result.national_id == "111111111"


class TestAbsentFields:
    @pytest.mark.parametrize(
        "text",
        ["", "Plain English note without labels", "שלום עולם\n12345\n1/1/2025"],
    )
    def test_text_without_labels_yields_empty_fields(self, text: str) -> None:
        assert extract_fields(text) == ExtractedFields()

    def test_none_is_treated_as_empty(self) -> None:
        assert extract_fields(None) == ExtractedFields()

    def test_name_label_with_empty_line_stays_empty(self) -> None:
        result = extract_fields("שם:\nת.ז.: 123456789\n")

        assert result.person_name == ""
        assert result.national_id == "123456789"

    def test_id_label_without_digits_stays_empty(self) -> None:
        assert extract_fields("ת.ז.: לא ידוע\n").national_id == ""


class TestNameLabel:
    def test_trims_surrounding_whitespace(self) -> None:
        assert extract_fields("שם:    Dana Levi   \n").person_name == "Dana Levi"

    def test_ignores_label_inside_longer_word(self) -> None:
        text = "רשם: Registrar\nשם: Dana Levi\n"

        assert extract_fields(text).person_name == "Dana Levi"

    def test_keeps_hebrew_names(self) -> None:
        assert extract_fields("שם: דנה לוי\n").person_name == "דנה לוי"


class TestNationalIdLabel:
    def test_label_without_trailing_period(self) -> None:
        assert extract_fields("ת.ז: 123456789").national_id == "123456789"

    def test_strips_internal_spaces_and_tabs(self) -> None:
        assert extract_fields("ת.ז.: 12 34\t56 789\n").national_id == "123456789"

    def test_value_in_next_table_cell(self) -> None:
        assert extract_fields("ת.ז.:\n123456789\n").national_id == "123456789"

    def test_does_not_join_digits_from_following_lines(self) -> None:
        text = "ת.ז.: 12345\n2025 סיכום\n"

        assert extract_fields(text).national_id == "12345"


class TestAppointmentDateLabel:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("5/3/2025", "05 Mar 2025"),
            ("05-03-2025", "05 Mar 2025"),
            ("5.3.25", "05 Mar 2025"),
            ("1/12/99", "01 Dec 1999"),
        ],
    )
    def test_normalizes_supported_formats(self, token: str, expected: str) -> None:
        assert extract_fields(f"תאריך ביקור: {token}").appointment_date == expected

    def test_accepts_plain_date_label(self) -> None:
        assert extract_fields("תאריך: 17/11/2025").appointment_date == "17 Nov 2025"

    def test_keeps_invalid_calendar_date_unchanged(self) -> None:
        assert extract_fields("תאריך ביקור: 31/2/2025").appointment_date == "31/2/2025"

    def test_ignores_other_dated_labels(self) -> None:
        text = "תאריך לידה: 1/1/1980\nתאריך ביקור: 2/2/2024\n"

        assert extract_fields(text).appointment_date == "02 Feb 2024"

    def test_label_without_date_token_stays_empty(self) -> None:
        assert extract_fields("תאריך ביקור: בקרוב").appointment_date == ""
