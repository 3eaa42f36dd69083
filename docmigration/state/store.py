from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from pathlib import Path

from docmigration.logging.logger import Log
from docmigration.registry.models import Document
from docmigration.registry.registry import DocumentRegistry
from docmigration.state.codec import decode, encode
from docmigration.state.exceptions import StateError
from docmigration.state.export import DEFAULT_TAG, encode_export


def timestamped_name(prefix: str, now: datetime | None = None) -> str:
    """Build ``{prefix}_YYYY-MM-DDTHH-MM-SS.csv``."""
    moment = now if now is not None else datetime.now(timezone.utc)
    return f"{prefix}_{moment.strftime('%Y-%m-%dT%H-%M-%S')}.csv"


class StateStore:
    """Reads and writes registry state and exports under one directory."""

    STATE_PREFIX = "app_state"
    EXPORT_PREFIX = "processed_documents"

    def __init__(
        self,
        directory: Path,
        require_appointment_date: bool = False,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._directory = directory
        self._require_appointment_date = require_appointment_date
        self._clock = clock if clock is not None else lambda: datetime.now(timezone.utc)

    def save(self, registry: DocumentRegistry, path: Path | None = None) -> Path:
        """Write the full registry. Without ``path`` a timestamped file is created."""
        target = path if path is not None else self._timestamped(self.STATE_PREFIX)
        self._write(target, encode(registry))
        Log.info(f"Saved {registry.total_count} document(s) to {target}")
        return target

    def export(
        self,
        documents: Iterable[Document],
        path: Path | None = None,
        tag: str = DEFAULT_TAG,
    ) -> Path:
        """Write the spreadsheet export for ``documents``."""
        rows = list(documents)
        target = path if path is not None else self._timestamped(self.EXPORT_PREFIX)
        self._write(target, encode_export(rows, tag=tag))
        Log.info(f"Exported {len(rows)} document(s) to {target}")
        return target

    def load(self, path: Path) -> DocumentRegistry:
        """Decode a state file into a new registry.

        Raises:
            FileNotFoundError: if the file does not exist.
            StateError: if the file cannot be read.
            StateFormatError: if the content is not a valid state file.
        """
        if not path.exists():
            raise FileNotFoundError(f"State file not found: {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StateError(f"Failed to read state file {path}: {exc}") from exc
        registry = decode(text, require_appointment_date=self._require_appointment_date)
        Log.info(f"Loaded {registry.total_count} document(s) from {path}")
        return registry

    def load_into(self, registry: DocumentRegistry, path: Path) -> None:
        """Replace ``registry`` with the file's content only once decoding succeeded."""
        registry.restore(self.load(path))

    def _timestamped(self, prefix: str) -> Path:
        return self._directory / timestamped_name(prefix, self._clock())

    @staticmethod
    def _write(path: Path, text: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8", newline="")
        except OSError as exc:
            raise StateError(f"Failed to write {path}: {exc}") from exc
