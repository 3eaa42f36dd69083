from abc import ABC, abstractmethod
from dataclasses import dataclass

from docmigration.classification.models import Classification
from docmigration.extraction.models import ExtractedFields
from docmigration.registry.models import Document
from docmigration.workspace.session import Session


@dataclass(slots=True)
class PipelineContext:
    session: Session
    document: Document
    raw_text: str = ""
    fields: ExtractedFields | None = None
    classification: Classification | None = None
    result: Document | None = None


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
