"""Command line for scanning, processing and correcting migration documents.

Every command loads the state file, applies one registry operation and
writes the state back, so a migration can be carried out over many sessions.
"""

import functools
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

import click

from docmigration.classification.models import FIELD_NAMES
from docmigration.config.settings import Settings
from docmigration.logging.logger import Log
from docmigration.processor.processor import build_processor
from docmigration.registry.exceptions import RegistryError
from docmigration.registry.models import Document
from docmigration.registry.registry import DocumentRegistry
from docmigration.registry.views import SORT_KEYS, error_only, filter_documents, sort_documents
from docmigration.state.exceptions import StateError
from docmigration.state.store import StateStore
from docmigration.worker.batch_runner import BatchRunner
from docmigration.worker.registration_runner import RegistrationRunner
from docmigration.workspace.exceptions import CollaboratorError
from docmigration.workspace.factory import CollaboratorFactory
from docmigration.workspace.session import Session

F = TypeVar("F", bound=Callable[..., Any])

BUCKETS = ("found", "processed", "errors", "hidden")


@dataclass
class AppContext:
    settings: Settings
    state_path: Path
    store: StateStore

    def load_registry(self) -> DocumentRegistry:
        """Load the state file, or start empty when there is none yet."""
        if not self.state_path.exists():
            Log.info(f"No state file at {self.state_path}, starting with an empty registry")
            return DocumentRegistry(
                require_appointment_date=self.settings.require_appointment_date
            )
        return self.store.load(self.state_path)

    def save_registry(self, registry: DocumentRegistry) -> None:
        self.store.save(registry, self.state_path)

    def session(self) -> Session:
        return Session.from_settings(self.settings)


def handle_errors(func: F) -> F:
    """Report domain errors as CLI errors instead of tracebacks."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (RegistryError, StateError, CollaboratorError, ValueError) as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper  # type: ignore[return-value]


@click.group()
@click.option(
    "--state",
    "state_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="State file to read and update (defaults to STATE_DIR/STATE_FILE).",
)
@click.pass_context
def cli(ctx: click.Context, state_path: Path | None) -> None:
    """Migrate patient details from Google Docs into a tabular register."""
    settings = Settings()
    Log.configure(settings.log_level)
    ctx.obj = AppContext(
        settings=settings,
        state_path=state_path or settings.state_dir / settings.state_file,
        store=StateStore(
            settings.state_dir,
            require_appointment_date=settings.require_appointment_date,
        ),
    )


@cli.command()
@click.argument("parent_id", default="root")
@click.pass_obj
@handle_errors
def folders(app: AppContext, parent_id: str) -> None:
    """List the folders directly under PARENT_ID."""
    source = CollaboratorFactory.create_source(app.settings)
    try:
        for folder in source.list_folders(app.session(), parent_id):
            click.echo(f"{folder.id}\t{folder.name}")
    finally:
        source.close()


@cli.command()
@click.argument("folder_id")
@click.pass_obj
@handle_errors
def scan(app: AppContext, folder_id: str) -> None:
    """Enumerate the documents under FOLDER_ID as the new found set."""
    registry = app.load_registry()
    source = CollaboratorFactory.create_source(app.settings)
    try:
        documents = source.list_documents(app.session(), folder_id)
    finally:
        source.close()
    registry.ingest_found(documents)
    app.save_registry(registry)
    _write_selection(app, registry.selected_ids)
    click.echo(f"Found {len(registry.found)} document(s)")


@cli.command()
@click.argument("document_ids", nargs=-1)
@click.option("--all", "select_all", is_flag=True, help="Select every found document.")
@click.option("--unprocessed", is_flag=True, help="Select found documents not yet processed.")
@click.option("--clear", is_flag=True, help="Clear the selection first.")
@click.pass_obj
@handle_errors
def select(
    app: AppContext,
    document_ids: tuple[str, ...],
    select_all: bool,
    unprocessed: bool,
    clear: bool,
) -> None:
    """Mark found documents for processing."""
    registry = app.load_registry()
    selection = _read_selection(app)
    if not clear:
        registry.select(document_id for document_id in selection if registry.is_found(document_id))
    if select_all:
        registry.select_all()
    if unprocessed:
        registry.select(doc.id for doc in registry.unprocessed_found())
    registry.select(document_ids)
    _write_selection(app, registry.selected_ids)
    click.echo(f"{len(registry.selected_ids)} document(s) selected")


@cli.command()
@click.option("--all", "process_all", is_flag=True, help="Process every unprocessed found document.")
@click.pass_obj
@handle_errors
def process(app: AppContext, process_all: bool) -> None:
    """Fetch, extract and classify the selected documents."""
    registry = app.load_registry()
    if process_all:
        registry.select(doc.id for doc in registry.unprocessed_found())
    else:
        registry.select(
            document_id
            for document_id in _read_selection(app)
            if registry.is_found(document_id)
        )
    if not registry.selected_ids:
        raise click.ClickException("Please select documents to process")

    source = CollaboratorFactory.create_source(app.settings)
    runner = BatchRunner(
        build_processor(app.settings, source),
        require_appointment_date=app.settings.require_appointment_date,
    )
    try:
        report = runner.run(app.session(), registry)
    except KeyboardInterrupt:
        Log.warning("Processing interrupted, keeping the documents merged so far")
        click.echo("Interrupted")
        return
    finally:
        source.close()
        app.save_registry(registry)
        _write_selection(app, registry.selected_ids)
    click.echo(
        f"Processed {report.processed_count} document(s): "
        f"{len(report.succeeded)} succeeded, {len(report.failed)} with errors"
    )


@cli.command()
@click.argument("bucket", type=click.Choice(BUCKETS), default="processed")
@click.option("--sort", "sort_key", type=click.Choice(SORT_KEYS), default=None)
@click.option("--desc", is_flag=True, help="Sort descending.")
@click.option("--filter", "filter_text", default="", help="Case-insensitive text filter.")
@click.option("--errors-only", is_flag=True, help="Only documents failing validation.")
@click.option("--unprocessed", is_flag=True, help="Found documents not yet processed.")
@click.pass_obj
@handle_errors
def show(
    app: AppContext,
    bucket: str,
    sort_key: str | None,
    desc: bool,
    filter_text: str,
    errors_only: bool,
    unprocessed: bool,
) -> None:
    """Print one bucket as tab-separated rows."""
    registry = app.load_registry()
    documents = getattr(registry, bucket)
    if unprocessed and bucket == "found":
        documents = registry.unprocessed_found()
    if errors_only:
        documents = error_only(documents)
    documents = filter_documents(documents, filter_text)
    if sort_key:
        documents = sort_documents(documents, sort_key, descending=desc)
    for doc in documents:
        click.echo(_format_row(doc))
    click.echo(f"{len(documents)} document(s)")


@cli.command()
@click.argument("document_id")
@click.argument("field", type=click.Choice(FIELD_NAMES))
@click.argument("value")
@click.pass_obj
@handle_errors
def edit(app: AppContext, document_id: str, field: str, value: str) -> None:
    """Correct FIELD of a processed document and reclassify it."""
    registry = app.load_registry()
    updated = registry.edit_field(document_id, field, value)
    app.save_registry(registry)
    click.echo(_format_row(updated))


@cli.command()
@click.argument("document_ids", nargs=-1, required=True)
@click.pass_obj
@handle_errors
def remove(app: AppContext, document_ids: tuple[str, ...]) -> None:
    """Remove processed documents; they stay found and can be processed again."""
    registry = app.load_registry()
    registry.remove_from_processed(document_ids)
    app.save_registry(registry)
    click.echo(f"Removed {len(document_ids)} document(s)")


@cli.command()
@click.argument("document_ids", nargs=-1, required=True)
@click.pass_obj
@handle_errors
def hide(app: AppContext, document_ids: tuple[str, ...]) -> None:
    """Exclude documents from every active list."""
    registry = app.load_registry()
    registry.hide(document_ids)
    app.save_registry(registry)
    click.echo(f"{len(registry.hidden)} document(s) hidden")


@cli.command()
@click.argument("document_ids", nargs=-1)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Export file (defaults to a timestamped file in STATE_DIR).",
)
@click.pass_obj
@handle_errors
def export(app: AppContext, document_ids: tuple[str, ...], output: Path | None) -> None:
    """Write processed documents as a spreadsheet CSV."""
    registry = app.load_registry()
    documents = _processed_subset(registry, document_ids)
    if not documents:
        raise click.ClickException("Please select documents to save")
    path = app.store.export(documents, output, tag=app.settings.export_tag)
    click.echo(f"Exported {len(documents)} document(s) to {path}")


@cli.command()
@click.argument("document_ids", nargs=-1)
@click.pass_obj
@handle_errors
def register(app: AppContext, document_ids: tuple[str, ...]) -> None:
    """Upsert processed documents into the register spreadsheet."""
    registry = app.load_registry()
    documents = _processed_subset(registry, document_ids)
    registrar = CollaboratorFactory.create_registrar(app.settings)
    try:
        report = RegistrationRunner(registrar).run(app.session(), documents)
    finally:
        registrar.close()
    click.echo(
        f"Registered {len(report.results)} document(s): {report.inserted} inserted, "
        f"{report.updated} updated"
    )
    for document_id, message in report.failures.items():
        click.echo(f"Failed {document_id}: {message}", err=True)


@cli.command("save-as")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path), required=False)
@click.pass_obj
@handle_errors
def save_as(app: AppContext, path: Path | None) -> None:
    """Write a copy of the current state (timestamped when PATH is omitted)."""
    registry = app.load_registry()
    target = app.store.save(registry, path)
    click.echo(f"Saved {registry.total_count} document(s) to {target}")


def _processed_subset(
    registry: DocumentRegistry,
    document_ids: tuple[str, ...],
) -> list[Document]:
    if not document_ids:
        return registry.processed
    return [registry.get(document_id) for document_id in document_ids]


def _selection_path(app: AppContext) -> Path:
    return app.state_path.with_suffix(".selection")


def _read_selection(app: AppContext) -> list[str]:
    path = _selection_path(app)
    if not path.exists():
        return []
    return [line.strip() for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]


def _write_selection(app: AppContext, document_ids: list[str]) -> None:
    path = _selection_path(app)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{document_id}\n" for document_id in document_ids), encoding="utf-8")


def _format_row(doc: Document) -> str:
    columns = [doc.id, doc.name]
    if doc.status:
        columns += [
            doc.person_name,
            doc.national_id,
            doc.appointment_date,
            doc.status,
            ", ".join(doc.missing_fields),
            ", ".join(doc.errors),
        ]
    else:
        columns += [doc.created, doc.modified]
    return "\t".join(columns)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
