from docmigration.registry.exceptions import (
    DocumentNotFoundError,
    RegistryError,
    UnknownFieldError,
)
from docmigration.registry.models import Document
from docmigration.registry.registry import DocumentRegistry

__all__ = [
    "Document",
    "DocumentNotFoundError",
    "DocumentRegistry",
    "RegistryError",
    "UnknownFieldError",
]
