from dataclasses import dataclass

ACTION_INSERTED = "inserted"
ACTION_UPDATED = "updated"


@dataclass(frozen=True)
class Folder:
    """A Drive folder offered for scanning."""

    id: str
    name: str


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of upserting one record into the remote register."""

    document_id: str
    action: str
    row_index: int | None = None
