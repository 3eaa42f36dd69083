from abc import ABC, abstractmethod

from docmigration.registry.models import Document
from docmigration.workspace.models import Folder, RegistrationResult
from docmigration.workspace.session import Session


class BaseDocumentSource(ABC):
    """Contract for enumerating and reading source documents."""

    @abstractmethod
    def list_folders(self, session: Session, parent_id: str = "root") -> list[Folder]:
        """Return the direct subfolders of ``parent_id``.

        Raises:
            CollaboratorError: on any remote failure.
        """

    @abstractmethod
    def list_documents(self, session: Session, folder_id: str) -> list[Document]:
        """Return every document under ``folder_id``, searching subfolders too.

        The returned documents carry provenance fields only.

        Raises:
            CollaboratorError: on any remote failure.
        """

    @abstractmethod
    def fetch_document_text(self, session: Session, document_id: str) -> str:
        """Return the document body as plain text in document order.

        Raises:
            CollaboratorError: on any remote failure.
        """

    def close(self) -> None:
        """Release network resources. No-op by default."""


class BaseRecordRegistrar(ABC):
    """Contract for writing processed records to the remote register."""

    @abstractmethod
    def register_record(self, session: Session, document: Document) -> RegistrationResult:
        """Insert or update the row keyed by ``document.id``.

        Raises:
            CollaboratorError: on any remote failure.
        """

    def close(self) -> None:
        """Release network resources. No-op by default."""
