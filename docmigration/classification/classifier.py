import re

from docmigration.classification.models import (
    APPOINTMENT_DATE,
    NATIONAL_ID,
    PERSON_NAME,
    Classification,
)
from docmigration.extraction.models import ExtractedFields

MISSING_PERSON_NAME = "Person Name (שם) not found in document"
MISSING_NATIONAL_ID = "Teudat Zehut (ת.ז.) not found in document"
MISSING_APPOINTMENT_DATE = "Appointment Date (תאריך) not found in document"
INVALID_NATIONAL_ID = "Teudat Zehut format is invalid (should be 9 digits)"

NATIONAL_ID_LENGTH = 9

_NATIONAL_ID_RE = re.compile(rf"^\d{{{NATIONAL_ID_LENGTH}}}$")
_WHITESPACE_RE = re.compile(r"\s+")


def classify(
    fields: ExtractedFields,
    *,
    require_appointment_date: bool = False,
) -> Classification:
    """Compute missing fields and validation errors for extracted values.

    The appointment date only counts as missing when ``require_appointment_date``
    is set; name and national ID are always required.
    """
    missing: list[str] = []
    errors: list[str] = []

    if not fields.person_name.strip():
        missing.append(PERSON_NAME)
        errors.append(MISSING_PERSON_NAME)

    national_id = fields.national_id.strip()
    if not national_id:
        missing.append(NATIONAL_ID)
        errors.append(MISSING_NATIONAL_ID)
    elif not is_valid_national_id(national_id):
        errors.append(INVALID_NATIONAL_ID)

    if require_appointment_date and not fields.appointment_date.strip():
        missing.append(APPOINTMENT_DATE)
        errors.append(MISSING_APPOINTMENT_DATE)

    return Classification(missing_fields=tuple(missing), errors=tuple(errors))


def is_valid_national_id(value: str) -> bool:
    """True when ``value`` is exactly nine digits once whitespace is removed."""
    return bool(_NATIONAL_ID_RE.match(_WHITESPACE_RE.sub("", value)))


def missing_fields_for(
    fields: ExtractedFields,
    *,
    require_appointment_date: bool = False,
) -> tuple[str, ...]:
    """Missing-field set alone, for records whose errors come from elsewhere."""
    return classify(fields, require_appointment_date=require_appointment_date).missing_fields
