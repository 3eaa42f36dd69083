from docmigration.classification.classifier import classify
from docmigration.extraction.extractor import extract_fields
from docmigration.logging.logger import Log
from docmigration.processor.exceptions import IncompletePipelineError
from docmigration.processor.pipeline import PipelineContext, PipelineStep
from docmigration.workspace.base import BaseDocumentSource


class FetchTextStep(PipelineStep):
    def __init__(self, source: BaseDocumentSource) -> None:
        self._source = source

    def run(self, context: PipelineContext) -> PipelineContext:
        context.raw_text = self._source.fetch_document_text(
            context.session,
            context.document.id,
        )
        Log.info(f"Fetched {len(context.raw_text)} chars from document {context.document.id}")
        return context


class ExtractFieldsStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        context.fields = extract_fields(context.raw_text)
        return context


class ClassifyStep(PipelineStep):
    def __init__(self, require_appointment_date: bool = False) -> None:
        self._require_appointment_date = require_appointment_date

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.fields is None:
            raise IncompletePipelineError(
                "PipelineContext.fields must be set before classification"
            )
        context.classification = classify(
            context.fields,
            require_appointment_date=self._require_appointment_date,
        )
        return context


class BuildRecordStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        if context.fields is None or context.classification is None:
            raise IncompletePipelineError(
                "PipelineContext.fields and classification must be set before building the record"
            )
        context.result = context.document.with_fields(context.fields).with_classification(
            context.classification
        )
        Log.info(f"Document {context.document.id} classified as {context.result.status}")
        return context
