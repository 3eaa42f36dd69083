from collections.abc import Iterator
from typing import Any

import httpx

from docmigration.logging.logger import Log
from docmigration.registry.models import Document
from docmigration.workspace.base import BaseDocumentSource
from docmigration.workspace.client_base import GoogleApiClient
from docmigration.workspace.exceptions import CollaboratorError
from docmigration.workspace.models import Folder
from docmigration.workspace.session import Session
from docmigration.workspace.text import flatten_document

DOCUMENT_MIME_TYPE = "application/vnd.google-apps.document"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

_FILE_FIELDS = "nextPageToken, files(id, name, mimeType, webViewLink, createdTime, modifiedTime)"


class GoogleDocumentSource(BaseDocumentSource):
    """Lists Google Docs through the Drive API and reads them through the Docs API."""

    def __init__(
        self,
        *,
        drive_base_url: str,
        docs_base_url: str,
        timeout_seconds: int,
        page_size: int = 100,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._drive = GoogleApiClient(
            base_url=drive_base_url,
            timeout_seconds=timeout_seconds,
            transport=transport,
        )
        self._docs = GoogleApiClient(
            base_url=docs_base_url,
            timeout_seconds=timeout_seconds,
            transport=transport,
        )
        self._page_size = page_size

    def list_folders(self, session: Session, parent_id: str = "root") -> list[Folder]:
        query = (
            f"'{parent_id}' in parents and mimeType = '{FOLDER_MIME_TYPE}' "
            "and trashed = false"
        )
        folders = [
            Folder(id=item["id"], name=item.get("name", ""))
            for item in self._list_files(session, query, resource="folder")
        ]
        return sorted(folders, key=lambda folder: folder.name.lower())

    def list_documents(self, session: Session, folder_id: str) -> list[Document]:
        documents: list[Document] = []
        pending = [folder_id]
        scanned: set[str] = set()

        while pending:
            current = pending.pop()
            if current in scanned:
                continue
            scanned.add(current)

            query = f"'{current}' in parents and trashed = false"
            for item in self._list_files(session, query, resource="folder"):
                mime_type = item.get("mimeType")
                if mime_type == DOCUMENT_MIME_TYPE:
                    documents.append(_document_from_file(item))
                elif mime_type == FOLDER_MIME_TYPE:
                    pending.append(item["id"])

        Log.info(
            f"Found {len(documents)} documents in {len(scanned)} folder(s) under {folder_id}"
        )
        return documents

    def fetch_document_text(self, session: Session, document_id: str) -> str:
        payload = self._docs.get(session, f"/documents/{document_id}", resource="document")
        return flatten_document(payload)

    def close(self) -> None:
        self._drive.close()
        self._docs.close()

    def _list_files(
        self,
        session: Session,
        query: str,
        *,
        resource: str,
    ) -> Iterator[dict[str, Any]]:
        page_token: str | None = None
        while True:
            params: dict[str, Any] = {
                "q": query,
                "fields": _FILE_FIELDS,
                "pageSize": self._page_size,
            }
            if page_token:
                params["pageToken"] = page_token
            payload = self._drive.get(session, "/files", resource=resource, params=params)
            files = payload.get("files") or []
            if not isinstance(files, list):
                raise CollaboratorError("Drive API 'files' must be a list")
            yield from files
            page_token = payload.get("nextPageToken")
            if not page_token:
                return


def _document_from_file(item: dict[str, Any]) -> Document:
    return Document(
        id=item["id"],
        name=item.get("name", ""),
        url=item.get("webViewLink", ""),
        created=item.get("createdTime", ""),
        modified=item.get("modifiedTime", ""),
    )
