"""In-memory collaborators.

Use these for local development and tests, and as a reference when
implementing another storage provider: implement BaseDocumentSource /
BaseRecordRegistrar and register the provider in CollaboratorFactory.
"""

from typing import ClassVar

from docmigration.registry.models import Document
from docmigration.workspace.base import BaseDocumentSource, BaseRecordRegistrar
from docmigration.workspace.exceptions import CollaboratorNotFoundError
from docmigration.workspace.models import (
    ACTION_INSERTED,
    ACTION_UPDATED,
    Folder,
    RegistrationResult,
)
from docmigration.workspace.session import Session


class ExampleDocumentSource(BaseDocumentSource):
    """Serves a fixed folder tree and document bodies without network calls."""

    DEFAULT_FOLDERS: ClassVar[dict[str, list[Folder]]] = {
        "root": [Folder(id="example-folder", name="Example patients")],
    }
    DEFAULT_DOCUMENTS: ClassVar[dict[str, list[Document]]] = {
        "example-folder": [
            Document(
                id="example-doc-1",
                name="Dana Levi",
                url="https://docs.google.com/document/d/example-doc-1/edit",
                created="2025-03-01T09:00:00.000Z",
                modified="2025-03-05T10:30:00.000Z",
            ),
            Document(
                id="example-doc-2",
                name="Unlabeled note",
                url="https://docs.google.com/document/d/example-doc-2/edit",
                created="2025-03-02T09:00:00.000Z",
                modified="2025-03-02T09:00:00.000Z",
            ),
        ],
    }
    DEFAULT_TEXTS: ClassVar[dict[str, str]] = {
        "example-doc-1": "שם: Dana Levi\nת.ז.: 123 456 789\nתאריך ביקור: 5/3/2025\n",
        "example-doc-2": "Follow-up call scheduled, details pending.\n",
    }

    def __init__(
        self,
        folders: dict[str, list[Folder]] | None = None,
        documents: dict[str, list[Document]] | None = None,
        texts: dict[str, str] | None = None,
    ) -> None:
        self._folders = folders if folders is not None else self.DEFAULT_FOLDERS
        self._documents = documents if documents is not None else self.DEFAULT_DOCUMENTS
        self._texts = texts if texts is not None else self.DEFAULT_TEXTS

    def list_folders(self, session: Session, parent_id: str = "root") -> list[Folder]:
        _ = session
        return list(self._folders.get(parent_id, []))

    def list_documents(self, session: Session, folder_id: str) -> list[Document]:
        _ = session
        documents: list[Document] = []
        pending = [folder_id]
        scanned: set[str] = set()
        while pending:
            current = pending.pop()
            if current in scanned:
                continue
            scanned.add(current)
            documents.extend(self._documents.get(current, []))
            pending.extend(folder.id for folder in self._folders.get(current, []))
        return documents

    def fetch_document_text(self, session: Session, document_id: str) -> str:
        _ = session
        if document_id not in self._texts:
            raise CollaboratorNotFoundError(f"Document {document_id} not found")
        return self._texts[document_id]


class ExampleRecordRegistrar(BaseRecordRegistrar):
    """Keeps registered rows in memory, keyed by document id like the real sheet."""

    def __init__(self) -> None:
        self.rows: dict[str, Document] = {}

    def register_record(self, session: Session, document: Document) -> RegistrationResult:
        _ = session
        if document.id in self.rows:
            row_index = list(self.rows).index(document.id) + 1
            self.rows[document.id] = document
            return RegistrationResult(document.id, ACTION_UPDATED, row_index)
        self.rows[document.id] = document
        return RegistrationResult(document.id, ACTION_INSERTED, len(self.rows))
