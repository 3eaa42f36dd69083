from docmigration.config.settings import Settings
from docmigration.workspace.base import BaseDocumentSource, BaseRecordRegistrar
from docmigration.workspace.drive_adapter import GoogleDocumentSource
from docmigration.workspace.example_adapter import ExampleDocumentSource, ExampleRecordRegistrar
from docmigration.workspace.sheets_adapter import GoogleSheetsRegistrar


class CollaboratorFactory:
    """Creates the configured document source and record registrar."""

    PROVIDERS = ("google", "example")

    @classmethod
    def create_source(cls, settings: Settings) -> BaseDocumentSource:
        provider = cls._provider(settings)
        if provider == "example":
            return ExampleDocumentSource()
        return GoogleDocumentSource(
            drive_base_url=settings.drive_api_base_url,
            docs_base_url=settings.docs_api_base_url,
            timeout_seconds=settings.http_timeout_seconds,
            page_size=settings.drive_page_size,
        )

    @classmethod
    def create_registrar(cls, settings: Settings) -> BaseRecordRegistrar:
        provider = cls._provider(settings)
        if provider == "example":
            return ExampleRecordRegistrar()
        return GoogleSheetsRegistrar(
            base_url=settings.sheets_api_base_url,
            spreadsheet_id=settings.google_sheets_id,
            tab_name=settings.sheet_tab_name,
            timeout_seconds=settings.http_timeout_seconds,
        )

    @classmethod
    def _provider(cls, settings: Settings) -> str:
        provider = settings.collaborator_provider.lower()
        if provider not in cls.PROVIDERS:
            raise ValueError(
                f"Unknown collaborator provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )
        return provider
