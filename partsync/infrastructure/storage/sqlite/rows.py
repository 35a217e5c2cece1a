"""Column conversions shared by the SQLite stores."""

from datetime import date, datetime


def to_iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except (ValueError, TypeError):
        return None


def parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


def placeholders(values: list) -> str:
    """'?, ?, ?' for an IN clause."""
    return ", ".join("?" for _ in values)
