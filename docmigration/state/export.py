"""User-facing spreadsheet export of processed documents."""

from collections.abc import Iterable

from docmigration.registry.models import Document
from docmigration.state.codec import BOM, write_csv

DEFAULT_TAG = "#mass.import"

EXPORT_HEADERS = (
    "Item Name",
    "Document ID",
    "Document Name",
    "Patient Name",
    "Patient ID",
    "Appointment Date",
    "Link",
    "Tag",
    "Status",
    "Missing Fields",
    "Errors",
    "Created",
    "Modified",
)


def encode_export(documents: Iterable[Document], tag: str = DEFAULT_TAG) -> str:
    """Render documents as BOM-prefixed CSV in the register's column layout."""
    return BOM + write_csv(EXPORT_HEADERS, (export_row(doc, tag) for doc in documents))


def export_row(doc: Document, tag: str = DEFAULT_TAG) -> dict[str, str]:
    return {
        "Item Name": doc.item_name,
        "Document ID": doc.id,
        "Document Name": doc.name,
        "Patient Name": doc.person_name,
        "Patient ID": doc.national_id,
        "Appointment Date": doc.appointment_date,
        "Link": doc.url,
        "Tag": tag,
        "Status": doc.status,
        "Missing Fields": ", ".join(doc.missing_fields),
        "Errors": ", ".join(doc.errors),
        "Created": doc.created,
        "Modified": doc.modified,
    }
