import threading
from dataclasses import dataclass, field

from docmigration.classification.classifier import missing_fields_for
from docmigration.logging.logger import Log
from docmigration.processor.processor import Processor
from docmigration.registry.models import Document
from docmigration.registry.registry import DocumentRegistry
from docmigration.workspace.session import Session


@dataclass
class BatchReport:
    """What happened to each selected document in one batch."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    cancelled: bool = False

    @property
    def processed_count(self) -> int:
        return len(self.succeeded) + len(self.failed)


class BatchRunner:
    """Process the registry selection one document at a time.

    Each document's result is merged before the next fetch starts, so a batch
    interrupted between documents never leaves a partial merge behind. A failure
    for one document becomes an error record and the batch continues.
    """

    def __init__(self, processor: Processor, require_appointment_date: bool = False) -> None:
        self._processor = processor
        self._require_appointment_date = require_appointment_date

    def run(
        self,
        session: Session,
        registry: DocumentRegistry,
        cancel_event: threading.Event | None = None,
    ) -> BatchReport:
        report = BatchReport()
        selected = registry.selected_documents()
        Log.info(f"Processing {len(selected)} selected document(s)")

        for document in selected:
            if cancel_event is not None and cancel_event.is_set():
                report.cancelled = True
                Log.warning(
                    f"Batch cancelled with {len(selected) - report.processed_count} "
                    "document(s) left"
                )
                break
            result = self._process_one(session, document)
            registry.merge_processed([result])
            registry.deselect([document.id])
            if result.errors or result.missing_fields:
                report.failed.append(document.id)
            else:
                report.succeeded.append(document.id)

        Log.info(
            f"Batch finished: {len(report.succeeded)} succeeded, {len(report.failed)} with errors"
        )
        return report

    def _process_one(self, session: Session, document: Document) -> Document:
        try:
            return self._processor.process(session, document)
        except Exception as exc:
            Log.error(f"Document {document.id} failed: {exc}")
            return self._failure_record(document, str(exc) or type(exc).__name__)

    def _failure_record(self, document: Document, message: str) -> Document:
        base = document.provenance()
        missing = missing_fields_for(
            base.fields,
            require_appointment_date=self._require_appointment_date,
        )
        return base.with_failure(message, missing)
