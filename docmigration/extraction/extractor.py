"""Label-anchored field extraction from flattened document text."""

import re

from docmigration.extraction.dates import DATE_TOKEN_PATTERN, normalize_date
from docmigration.extraction.models import ExtractedFields

DATE_LABELS = ("תאריך ביקור", "תאריך תור", "תאריך פגישה", "תאריך")

_HEBREW_LETTER = r"א-ת"

# "שם" is also a suffix of longer words (e.g. "רשם"), so it must not follow a letter.
_NAME_RE = re.compile(rf"(?<![{_HEBREW_LETTER}])שם[ \t]*:[ \t]*([^\r\n]*)")

# The value may sit on the following line when the label is in its own table cell.
_ID_RE = re.compile(r"ת\.ז\.?[ \t]*:\s*(\d(?:[ \t]*\d)*)")

_DATE_RE = re.compile(
    r"(?:"
    + "|".join(r"\s+".join(map(re.escape, label.split())) for label in DATE_LABELS)
    + r")[ \t]*:\s*(?P<token>"
    + DATE_TOKEN_PATTERN
    + r")"
)

_WHITESPACE_RE = re.compile(r"\s+")


def extract_fields(text: str | None) -> ExtractedFields:
    """Find the person name, national ID and appointment date in ``text``.

    Each field is searched independently, so label order in the document does
    not matter. Missing labels yield empty strings; this function never raises.
    """
    if not text:
        return ExtractedFields()
    return ExtractedFields(
        person_name=_extract_name(text),
        national_id=_extract_national_id(text),
        appointment_date=_extract_appointment_date(text),
    )


def _extract_name(text: str) -> str:
    match = _NAME_RE.search(text)
    if match is None:
        return ""
    return match.group(1).strip()


def _extract_national_id(text: str) -> str:
    match = _ID_RE.search(text)
    if match is None:
        return ""
    return _WHITESPACE_RE.sub("", match.group(1))


def _extract_appointment_date(text: str) -> str:
    match = _DATE_RE.search(text)
    if match is None:
        return ""
    return normalize_date(match.group("token"))
