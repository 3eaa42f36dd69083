"""Sorting and filtering for registry list views."""

from collections.abc import Iterable
from datetime import datetime, timezone

from docmigration.classification.models import STATUS_ERROR
from docmigration.extraction.dates import MONTH_ABBREVIATIONS
from docmigration.registry.models import Document

SORT_KEYS = (
    "id",
    "name",
    "url",
    "created",
    "modified",
    "person_name",
    "national_id",
    "appointment_date",
    "item_name",
    "status",
)
DATE_SORT_KEYS = frozenset({"created", "modified", "appointment_date"})

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)
_FILTER_ATTRIBUTES = ("name", "id", "person_name", "national_id", "appointment_date")


def sort_documents(
    documents: Iterable[Document],
    key: str,
    descending: bool = False,
) -> list[Document]:
    """Sort by one attribute. Ties keep their input order in both directions.

    Raises:
        ValueError: if ``key`` is not a sortable attribute.
    """
    if key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key '{key}'. Choose from: {list(SORT_KEYS)}")
    if key in DATE_SORT_KEYS:
        return sorted(
            documents,
            key=lambda doc: parse_sort_date(getattr(doc, key)),
            reverse=descending,
        )
    return sorted(documents, key=lambda doc: getattr(doc, key) or "", reverse=descending)


def filter_documents(documents: Iterable[Document], text: str) -> list[Document]:
    """Case-insensitive substring match over names, id, national ID and date."""
    needle = text.strip().lower()
    if not needle:
        return list(documents)
    return [
        doc
        for doc in documents
        if any(needle in getattr(doc, attribute).lower() for attribute in _FILTER_ATTRIBUTES)
    ]


def error_only(documents: Iterable[Document]) -> list[Document]:
    return [doc for doc in documents if doc.status == STATUS_ERROR or doc.has_errors]


def parse_sort_date(value: str) -> datetime:
    """Parse an ISO timestamp or a ``DD Mon YYYY`` date; anything else sorts first."""
    value = value.strip()
    if not value:
        return _EARLIEST
    parsed = _parse_iso(value) or _parse_day_month_year(value)
    if parsed is None:
        return _EARLIEST
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_iso(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _parse_day_month_year(value: str) -> datetime | None:
    parts = value.split()
    if len(parts) != 3 or parts[1] not in MONTH_ABBREVIATIONS:
        return None
    day, month, year = parts
    try:
        return datetime(int(year), MONTH_ABBREVIATIONS.index(month) + 1, int(day))
    except ValueError:
        return None
