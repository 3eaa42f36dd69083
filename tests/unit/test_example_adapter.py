import pytest

from docmigration.registry.models import Document
from docmigration.workspace.example_adapter import ExampleDocumentSource, ExampleRecordRegistrar
from docmigration.workspace.exceptions import CollaboratorNotFoundError
from docmigration.workspace.models import ACTION_INSERTED, ACTION_UPDATED, Folder
from docmigration.workspace.session import Session


class TestExampleDocumentSource:
    def test_default_tree(self, session: Session) -> None:
        source = ExampleDocumentSource()

        assert source.list_folders(session) == [Folder(id="example-folder", name="Example patients")]
        assert [doc.id for doc in source.list_documents(session, "root")] == [
            "example-doc-1",
            "example-doc-2",
        ]

    def test_cyclic_folders_are_scanned_once(self, session: Session) -> None:
        source = ExampleDocumentSource(
            folders={"a": [Folder("b", "B")], "b": [Folder("a", "A")]},
            documents={"a": [Document(id="doc-a")], "b": [Document(id="doc-b")]},
            texts={},
        )

        assert sorted(doc.id for doc in source.list_documents(session, "a")) == ["doc-a", "doc-b"]

    def test_unknown_document_text(self, session: Session) -> None:
        with pytest.raises(CollaboratorNotFoundError):
            ExampleDocumentSource().fetch_document_text(session, "missing")


class TestExampleRecordRegistrar:
    def test_insert_then_update(self, session: Session) -> None:
        registrar = ExampleRecordRegistrar()

        first = registrar.register_record(session, Document(id="a"))
        registrar.register_record(session, Document(id="b"))
        again = registrar.register_record(session, Document(id="a", name="renamed"))

        assert (first.action, first.row_index) == (ACTION_INSERTED, 1)
        assert (again.action, again.row_index) == (ACTION_UPDATED, 1)
        assert registrar.rows["a"].name == "renamed"
        assert len(registrar.rows) == 2
