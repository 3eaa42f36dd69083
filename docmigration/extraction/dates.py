import re
from datetime import date

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

DATE_TOKEN_PATTERN = (
    r"(?<!\d)(?P<day>\d{1,2})(?P<sep>[/.\-])(?P<month>\d{1,2})(?P=sep)"
    r"(?P<year>\d{4}|\d{2})(?!\d)"
)

_DATE_TOKEN_RE = re.compile(rf"^{DATE_TOKEN_PATTERN}$")


def expand_year(year: str) -> int:
    """Two-digit years below 50 belong to the 2000s, the rest to the 1900s."""
    value = int(year)
    if len(year) == 2:
        return 2000 + value if value < 50 else 1900 + value
    return value


def normalize_date(token: str) -> str:
    """Reformat a D/M/Y, D-M-Y or D.M.Y token as ``DD Mon YYYY``.

    Tokens that do not describe a real calendar date are returned unchanged.
    """
    match = _DATE_TOKEN_RE.match(token.strip())
    if match is None:
        return token
    try:
        parsed = date(
            expand_year(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
        )
    except ValueError:
        return token
    return f"{parsed.day:02d} {MONTH_ABBREVIATIONS[parsed.month - 1]} {parsed.year:04d}"
