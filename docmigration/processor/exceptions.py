class ProcessorError(Exception):
    """Base exception for per-document processing errors."""


class IncompletePipelineError(ProcessorError):
    """Raised when a step runs before the context data it needs was produced."""
