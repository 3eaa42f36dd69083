from dataclasses import dataclass, replace

from docmigration.classification.models import (
    APPOINTMENT_DATE,
    NATIONAL_ID,
    PERSON_NAME,
    Classification,
)
from docmigration.extraction.models import ExtractedFields
from docmigration.registry.exceptions import UnknownFieldError

FIELD_ATTRIBUTES = {
    PERSON_NAME: "person_name",
    NATIONAL_ID: "national_id",
    APPOINTMENT_DATE: "appointment_date",
}


@dataclass(frozen=True)
class Document:
    """A Google Doc tracked by the registry.

    Found documents carry provenance only. Processed documents also carry the
    extracted fields and the classification derived from them.
    """

    id: str
    name: str = ""
    url: str = ""
    created: str = ""
    modified: str = ""
    person_name: str = ""
    national_id: str = ""
    appointment_date: str = ""
    missing_fields: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    status: str = ""

    @property
    def fields(self) -> ExtractedFields:
        return ExtractedFields(
            person_name=self.person_name,
            national_id=self.national_id,
            appointment_date=self.appointment_date,
        )

    @property
    def item_name(self) -> str:
        return f"{self.person_name} - {self.national_id} - {self.appointment_date}"

    @property
    def has_errors(self) -> bool:
        return bool(self.missing_fields or self.errors)

    def provenance(self) -> "Document":
        """Copy holding only the enumeration metadata."""
        return Document(
            id=self.id,
            name=self.name,
            url=self.url,
            created=self.created,
            modified=self.modified,
        )

    def with_fields(self, fields: ExtractedFields) -> "Document":
        return replace(
            self,
            person_name=fields.person_name,
            national_id=fields.national_id,
            appointment_date=fields.appointment_date,
        )

    def with_classification(self, classification: Classification) -> "Document":
        return replace(
            self,
            missing_fields=classification.missing_fields,
            errors=classification.errors,
            status=classification.status,
        )

    def with_failure(self, message: str, missing_fields: tuple[str, ...]) -> "Document":
        """Error record for a document whose text could not be processed."""
        return replace(
            self,
            missing_fields=missing_fields,
            errors=(message,),
            status=Classification(missing_fields, (message,)).status,
        )

    def with_field(self, field: str, value: str) -> "Document":
        """Set one user-editable field by its wire name. Classification is left stale."""
        attribute = FIELD_ATTRIBUTES.get(field)
        if attribute is None:
            raise UnknownFieldError(
                f"Field '{field}' is not editable. Choose from: {list(FIELD_ATTRIBUTES)}"
            )
        return replace(self, **{attribute: value})
