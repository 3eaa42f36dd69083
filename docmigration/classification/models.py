from dataclasses import dataclass

PERSON_NAME = "personName"
NATIONAL_ID = "nationalId"
APPOINTMENT_DATE = "appointmentDate"

FIELD_NAMES = (PERSON_NAME, NATIONAL_ID, APPOINTMENT_DATE)

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class Classification:
    """Outcome of validating one set of extracted fields."""

    missing_fields: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def status(self) -> str:
        if self.missing_fields or self.errors:
            return STATUS_ERROR
        return STATUS_SUCCESS
