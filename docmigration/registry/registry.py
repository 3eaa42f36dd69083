from collections.abc import Iterable

from docmigration.classification.classifier import classify
from docmigration.classification.models import STATUS_ERROR
from docmigration.logging.logger import Log
from docmigration.registry.exceptions import DocumentNotFoundError
from docmigration.registry.models import Document


class DocumentRegistry:
    """In-memory partition of documents into found, processed, error and hidden buckets.

    The error bucket is a membership set over processed ids, so a document's
    data lives in exactly one place. Every mutator keeps error membership in
    line with the document's current status; callers never touch the buckets
    directly.
    """

    def __init__(self, require_appointment_date: bool = False) -> None:
        self._require_appointment_date = require_appointment_date
        self._found: dict[str, Document] = {}
        self._processed: dict[str, Document] = {}
        self._error_ids: dict[str, None] = {}
        self._hidden: dict[str, Document] = {}
        self._selection: dict[str, None] = {}

    @property
    def require_appointment_date(self) -> bool:
        return self._require_appointment_date

    # Read access

    @property
    def found(self) -> list[Document]:
        return list(self._found.values())

    @property
    def processed(self) -> list[Document]:
        return list(self._processed.values())

    @property
    def errors(self) -> list[Document]:
        return [self._processed[document_id] for document_id in self._error_ids]

    @property
    def hidden(self) -> list[Document]:
        return list(self._hidden.values())

    @property
    def selected_ids(self) -> list[str]:
        return list(self._selection)

    @property
    def total_count(self) -> int:
        """Entries a state file holds; error ids are already counted as processed."""
        return len(self._found) + len(self._processed) + len(self._hidden)

    @property
    def is_empty(self) -> bool:
        return self.total_count == 0

    def counts(self) -> dict[str, int]:
        return {
            "found": len(self._found),
            "processed": len(self._processed),
            "error": len(self._error_ids),
            "hidden": len(self._hidden),
        }

    def get(self, document_id: str) -> Document:
        """Return a processed document.

        Raises:
            DocumentNotFoundError: if the id has not been processed.
        """
        document = self._processed.get(document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} is not processed")
        return document

    def is_found(self, document_id: str) -> bool:
        return document_id in self._found

    def is_error(self, document_id: str) -> bool:
        return document_id in self._error_ids

    def unprocessed_found(self) -> list[Document]:
        return [doc for doc in self._found.values() if doc.id not in self._processed]

    def selected_documents(self) -> list[Document]:
        return [self._found[document_id] for document_id in self._selection]

    # Enumeration and selection

    def ingest_found(self, documents: Iterable[Document]) -> None:
        """Replace the found bucket with a fresh enumeration and clear the selection.

        Hidden documents stay hidden and are left out of the found bucket.
        """
        found: dict[str, Document] = {}
        skipped = 0
        for document in documents:
            if document.id in self._hidden:
                skipped += 1
                continue
            found.setdefault(document.id, document.provenance())
        self._found = found
        self._selection = {}
        Log.info(f"Registry holds {len(found)} found documents, {skipped} hidden skipped")

    def select(self, document_ids: Iterable[str]) -> None:
        """Add found documents to the selection, keeping first-selected order.

        Raises:
            DocumentNotFoundError: if an id is not in the found bucket.
        """
        ids = list(document_ids)
        unknown = [document_id for document_id in ids if document_id not in self._found]
        if unknown:
            raise DocumentNotFoundError(f"Documents not found: {', '.join(unknown)}")
        for document_id in ids:
            self._selection.setdefault(document_id, None)

    def select_all(self) -> None:
        self.select(self._found)

    def deselect(self, document_ids: Iterable[str]) -> None:
        for document_id in document_ids:
            self._selection.pop(document_id, None)

    def clear_selection(self) -> None:
        self._selection = {}

    # Processing results

    def merge_processed(self, results: Iterable[Document]) -> None:
        """Upsert processed documents by id and reconcile their error membership."""
        for document in results:
            self._processed[document.id] = document
            self._sync_error_membership(document)

    def edit_field(self, document_id: str, field: str, value: str) -> Document:
        """Apply a manual correction and reclassify the document.

        Raises:
            DocumentNotFoundError: if the id has not been processed.
            UnknownFieldError: if ``field`` is not a user-editable field.
        """
        document = self.get(document_id)
        updated = document.with_field(field, value.strip())
        classification = classify(
            updated.fields,
            require_appointment_date=self._require_appointment_date,
        )
        updated = updated.with_classification(classification)
        self._processed[document_id] = updated
        self._sync_error_membership(updated)
        Log.info(f"Edited {field} of document {document_id}: status {updated.status}")
        return updated

    def remove_from_processed(self, document_ids: Iterable[str]) -> None:
        for document_id in document_ids:
            self._processed.pop(document_id, None)
            self._error_ids.pop(document_id, None)

    def remove_from_errors(self, document_ids: Iterable[str]) -> None:
        """Dismiss documents from the error view; they remain processed."""
        for document_id in document_ids:
            self._error_ids.pop(document_id, None)

    def hide(self, document_ids: Iterable[str]) -> None:
        """Move documents out of every active bucket into the hidden bucket."""
        for document_id in document_ids:
            source = self._found.get(document_id) or self._processed.get(document_id)
            if source is None:
                Log.debug(f"Ignoring hide of unknown document {document_id}")
                continue
            self._found.pop(document_id, None)
            self._processed.pop(document_id, None)
            self._error_ids.pop(document_id, None)
            self._selection.pop(document_id, None)
            self._hidden.setdefault(document_id, source.provenance())

    # Wholesale state

    def add_hidden(self, documents: Iterable[Document]) -> None:
        for document in documents:
            self._hidden.setdefault(document.id, document.provenance())

    def restore(self, other: "DocumentRegistry") -> None:
        """Replace every bucket with the contents of ``other`` in one step."""
        self._found = dict(other._found)
        self._processed = dict(other._processed)
        self._error_ids = dict(other._error_ids)
        self._hidden = dict(other._hidden)
        self._selection = {}

    def _sync_error_membership(self, document: Document) -> None:
        if document.status == STATUS_ERROR or document.has_errors:
            self._error_ids.setdefault(document.id, None)
        else:
            self._error_ids.pop(document.id, None)
