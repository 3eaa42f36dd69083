from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractedFields:
    """The three labeled values found in a document body. Absent values are empty strings."""

    person_name: str = ""
    national_id: str = ""
    appointment_date: str = ""
