import pytest

from docmigration.registry import Document
from docmigration.workspace.session import Session


@pytest.fixture()
def complete_text() -> str:
    """Document body containing all three labeled fields."""
    return "סיכום ביקור\nשם: Dana Levi\nת.ז.: 123 456 789\nתאריך ביקור: 5/3/2025\n"


@pytest.fixture()
def session() -> Session:
    return Session(access_token="token-123", user_email="clerk@example.com")


@pytest.fixture()
def found_document() -> Document:
    return Document(
        id="doc-1",
        name="Dana Levi",
        url="https://docs.google.com/document/d/doc-1/edit",
        created="2025-03-01T09:00:00.000Z",
        modified="2025-03-05T10:30:00.000Z",
    )
