from collections.abc import Iterable
from dataclasses import dataclass, field

from docmigration.logging.logger import Log
from docmigration.registry.models import Document
from docmigration.workspace.base import BaseRecordRegistrar
from docmigration.workspace.models import ACTION_INSERTED, RegistrationResult
from docmigration.workspace.session import Session


@dataclass
class RegistrationReport:
    results: list[RegistrationResult] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def inserted(self) -> int:
        return sum(1 for result in self.results if result.action == ACTION_INSERTED)

    @property
    def updated(self) -> int:
        return len(self.results) - self.inserted


class RegistrationRunner:
    """Upsert records into the remote register, isolating per-record failures."""

    def __init__(self, registrar: BaseRecordRegistrar) -> None:
        self._registrar = registrar

    def run(self, session: Session, documents: Iterable[Document]) -> RegistrationReport:
        report = RegistrationReport()
        for document in documents:
            try:
                result = self._registrar.register_record(session, document)
            except Exception as exc:
                Log.error(f"Registering document {document.id} failed: {exc}")
                report.failures[document.id] = str(exc) or type(exc).__name__
                continue
            Log.info(
                f"Document {document.id} {result.action} at row {result.row_index}"
            )
            report.results.append(result)
        Log.info(
            f"Registration finished: {report.inserted} inserted, {report.updated} updated, "
            f"{len(report.failures)} failed"
        )
        return report
