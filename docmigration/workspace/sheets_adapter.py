import re
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx

from docmigration.registry.models import Document
from docmigration.workspace.base import BaseRecordRegistrar
from docmigration.workspace.client_base import GoogleApiClient
from docmigration.workspace.models import ACTION_INSERTED, ACTION_UPDATED, RegistrationResult
from docmigration.workspace.session import Session

SHEET_STATUS_ERROR = "Error"
SHEET_STATUS_PROCESSED = "Processed"

_ROW_NUMBER_RE = re.compile(r"![A-Z]+(\d+)")


def sheet_row(document: Document, timestamp: str) -> list[str]:
    """Column layout A..J of the register sheet."""
    return [
        document.id,
        document.name,
        document.person_name,
        document.national_id,
        SHEET_STATUS_ERROR if document.errors else SHEET_STATUS_PROCESSED,
        timestamp,
        "; ".join(document.errors),
        document.url,
        document.created,
        document.modified,
    ]


class GoogleSheetsRegistrar(BaseRecordRegistrar):
    """Upserts processed records into one tab of a Google spreadsheet, keyed by column A."""

    def __init__(
        self,
        *,
        base_url: str,
        spreadsheet_id: str,
        tab_name: str,
        timeout_seconds: int,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not spreadsheet_id:
            raise ValueError("google_sheets_id is required to register records")
        self._client = GoogleApiClient(
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            transport=transport,
        )
        self._spreadsheet_id = spreadsheet_id
        self._tab_name = tab_name
        self._clock = clock if clock is not None else lambda: datetime.now(timezone.utc)

    def register_record(self, session: Session, document: Document) -> RegistrationResult:
        timestamp = self._clock().isoformat().replace("+00:00", "Z")
        row = sheet_row(document, timestamp)
        existing = self.find_row(session, document.id)

        if existing is not None:
            self._client.request(
                "PUT",
                session,
                self._values_path(f"A{existing}:J{existing}"),
                resource="spreadsheet",
                params={"valueInputOption": "USER_ENTERED"},
                json={"values": [row]},
            )
            return RegistrationResult(document.id, ACTION_UPDATED, existing)

        payload = self._client.request(
            "POST",
            session,
            self._values_path("A:J") + ":append",
            resource="spreadsheet",
            params={"valueInputOption": "USER_ENTERED", "insertDataOption": "INSERT_ROWS"},
            json={"values": [row]},
        )
        return RegistrationResult(document.id, ACTION_INSERTED, _appended_row(payload))

    def find_row(self, session: Session, document_id: str) -> int | None:
        """1-based row number whose column A equals ``document_id``."""
        payload = self._client.get(session, self._values_path("A:A"), resource="spreadsheet")
        for index, row in enumerate(payload.get("values") or [], start=1):
            if row and row[0] == document_id:
                return index
        return None

    def close(self) -> None:
        self._client.close()

    def _values_path(self, cells: str) -> str:
        cell_range = quote(f"{self._tab_name}!{cells}", safe="!:")
        return f"/spreadsheets/{self._spreadsheet_id}/values/{cell_range}"


def _appended_row(payload: dict[str, Any]) -> int | None:
    updated_range = (payload.get("updates") or {}).get("updatedRange", "")
    match = _ROW_NUMBER_RE.search(updated_range)
    return int(match.group(1)) if match else None
