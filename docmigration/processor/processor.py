from docmigration.config.settings import Settings
from docmigration.processor.exceptions import IncompletePipelineError
from docmigration.processor.pipeline import PipelineContext, PipelineStep
from docmigration.processor.steps import (
    BuildRecordStep,
    ClassifyStep,
    ExtractFieldsStep,
    FetchTextStep,
)
from docmigration.registry.models import Document
from docmigration.workspace.base import BaseDocumentSource
from docmigration.workspace.session import Session


class Processor:
    """Turns one found document into a processed record.

    Pipeline: fetch text -> extract fields -> classify -> build record.
    Step errors propagate; isolating them per document is the batch runner's job.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = steps

    def process(self, session: Session, document: Document) -> Document:
        context = PipelineContext(session=session, document=document)
        for step in self._steps:
            context = step.run(context)
        if context.result is None:
            raise IncompletePipelineError(
                f"Pipeline finished without a record for document {document.id}"
            )
        return context.result


def build_processor(settings: Settings, source: BaseDocumentSource) -> Processor:
    """Build a Processor wired to ``source``."""
    return Processor(
        steps=[
            FetchTextStep(source),
            ExtractFieldsStep(),
            ClassifyStep(require_appointment_date=settings.require_appointment_date),
            BuildRecordStep(),
        ]
    )
