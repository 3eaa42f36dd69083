"""Flat CSV encoding of the whole document registry.

One quoted row per document, tagged with its bucket in ``documentType``.
Error membership is not written separately: it is re-derived from processed
rows on load.
"""

import csv
import io
from collections.abc import Iterable, Sequence
from dataclasses import replace

from docmigration.classification.classifier import missing_fields_for
from docmigration.classification.models import (
    FIELD_NAMES,
    NATIONAL_ID,
    STATUS_ERROR,
    Classification,
)
from docmigration.logging.logger import Log
from docmigration.registry.models import Document
from docmigration.registry.registry import DocumentRegistry
from docmigration.state.exceptions import StateFormatError

BOM = "\ufeff"
LIST_SEPARATOR = ";"

TYPE_FOUND = "found"
TYPE_PROCESSED = "processed"
TYPE_ERROR = "error"
TYPE_HIDDEN = "hidden"

STATE_HEADERS = (
    "documentType",
    "id",
    "name",
    "url",
    "created",
    "modified",
    "personName",
    "teudatZehut",
    "appointmentDate",
    "status",
    "missingFields",
    "errors",
)
REQUIRED_HEADERS = ("documentType", "id", "name")

# Older state files name the national ID field after its column.
_LEGACY_FIELD_NAMES = {"teudatZehut": NATIONAL_ID}


def encode(registry: DocumentRegistry) -> str:
    """Serialize every bucket of ``registry`` to BOM-prefixed CSV text."""
    rows: list[dict[str, str]] = []
    rows.extend(_provenance_row(TYPE_FOUND, doc) for doc in registry.found)
    rows.extend(_processed_row(doc) for doc in registry.processed)
    rows.extend(_provenance_row(TYPE_HIDDEN, doc) for doc in registry.hidden)
    return BOM + write_csv(STATE_HEADERS, rows)


def decode(text: str, *, require_appointment_date: bool = False) -> DocumentRegistry:
    """Build a new registry from state text.

    Rows whose field count differs from the header are skipped. A processed row
    is an error when its stored status is an error, when it lists missing fields
    or errors, or when its field values fail classification now.

    Raises:
        StateFormatError: if the text is empty or lacks a required column.
    """
    rows = list(csv.reader(io.StringIO(text.removeprefix(BOM), newline="")))
    rows = [row for row in rows if any(cell.strip() for cell in row)]
    if not rows:
        raise StateFormatError("State file is empty or invalid")

    headers = [header.strip() for header in rows[0]]
    missing = [header for header in REQUIRED_HEADERS if header not in headers]
    if missing:
        raise StateFormatError(f"State file is missing required headers: {missing}")

    found: list[Document] = []
    processed: list[Document] = []
    hidden: list[Document] = []
    skipped = 0
    for line_number, values in enumerate(rows[1:], start=2):
        if len(values) != len(headers):
            Log.warning(
                f"Skipping state row {line_number}: expected {len(headers)} fields, "
                f"got {len(values)}"
            )
            skipped += 1
            continue
        row = dict(zip(headers, values))
        document_type = row["documentType"].strip()
        if document_type == TYPE_FOUND:
            found.append(_document_from_row(row).provenance())
        elif document_type in (TYPE_PROCESSED, TYPE_ERROR):
            processed.append(_processed_from_row(row, require_appointment_date))
        elif document_type == TYPE_HIDDEN:
            hidden.append(_document_from_row(row).provenance())
        else:
            Log.warning(f"Skipping state row {line_number}: unknown type '{document_type}'")
            skipped += 1

    registry = DocumentRegistry(require_appointment_date=require_appointment_date)
    registry.add_hidden(hidden)
    registry.ingest_found(found)
    registry.merge_processed(processed)
    Log.info(f"Decoded state: {registry.counts()}, {skipped} rows skipped")
    return registry


def write_csv(headers: Sequence[str], rows: Iterable[dict[str, str]]) -> str:
    """Write rows with every cell quoted and ``\\n`` line endings."""
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=list(headers),
        quoting=csv.QUOTE_ALL,
        lineterminator="\n",
    )
    buffer.write(",".join(headers) + "\n")
    writer.writerows(rows)
    return buffer.getvalue().removesuffix("\n")


def join_list(values: Iterable[str]) -> str:
    return LIST_SEPARATOR.join(values)


def split_list(value: str) -> tuple[str, ...]:
    return tuple(part for part in value.split(LIST_SEPARATOR) if part)


def _provenance_row(document_type: str, doc: Document) -> dict[str, str]:
    row = dict.fromkeys(STATE_HEADERS, "")
    row.update(
        documentType=document_type,
        id=doc.id,
        name=doc.name,
        url=doc.url,
        created=doc.created,
        modified=doc.modified,
    )
    return row


def _processed_row(doc: Document) -> dict[str, str]:
    row = _provenance_row(TYPE_PROCESSED, doc)
    row.update(
        personName=doc.person_name,
        teudatZehut=doc.national_id,
        appointmentDate=doc.appointment_date,
        status=doc.status,
        missingFields=join_list(doc.missing_fields),
        errors=join_list(doc.errors),
    )
    return row


def _document_from_row(row: dict[str, str]) -> Document:
    return Document(
        id=row["id"],
        name=row.get("name", ""),
        url=row.get("url", ""),
        created=row.get("created", ""),
        modified=row.get("modified", ""),
        person_name=row.get("personName", ""),
        national_id=row.get("teudatZehut", ""),
        appointment_date=row.get("appointmentDate", ""),
    )


def _processed_from_row(row: dict[str, str], require_appointment_date: bool) -> Document:
    document = _document_from_row(row)
    errors = split_list(row.get("errors", ""))
    recomputed = missing_fields_for(
        document.fields,
        require_appointment_date=require_appointment_date,
    )
    stored_missing = {
        _LEGACY_FIELD_NAMES.get(name, name) for name in split_list(row.get("missingFields", ""))
    }
    unknown = stored_missing - set(FIELD_NAMES)
    if unknown:
        Log.debug(f"Document {document.id}: ignoring unknown missing fields {sorted(unknown)}")
    missing = tuple(
        name for name in FIELD_NAMES if name in recomputed or name in stored_missing
    )
    classified = document.with_classification(
        Classification(missing_fields=missing, errors=errors)
    )
    if row.get("status", "").strip() == STATUS_ERROR:
        return replace(classified, status=STATUS_ERROR)
    return classified
