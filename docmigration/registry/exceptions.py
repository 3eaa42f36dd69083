class RegistryError(Exception):
    """Base exception for document registry operations."""


class DocumentNotFoundError(RegistryError):
    """Raised when an operation names a document the registry does not hold."""


class UnknownFieldError(RegistryError):
    """Raised when an edit targets a field that is not user-editable."""
