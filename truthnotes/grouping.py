"""Date grouping and search filtering of notes for display."""

from datetime import date, datetime, timezone, tzinfo
from typing import Iterable, Mapping

from loguru import logger

from truthnotes.domain.note import Note

DATE_KEY_FORMAT = "%Y-%m-%d"


def to_local(dt: datetime, tz: tzinfo | None = None) -> datetime:
    """Convert a timestamp to `tz`, or to the process local zone when `tz` is None.

    Naive timestamps are taken to be UTC, which is what the remote service stores.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz)


def date_key(dt: datetime, tz: tzinfo | None = None) -> str:
    return to_local(dt, tz).strftime(DATE_KEY_FORMAT)


def group_by_day(notes: Iterable[Note], tz: tzinfo | None = None) -> dict[str, list[Note]]:
    """Bucket notes by the local calendar day they were created on.

    Notes without a creation time cannot be placed on a day and are left out.
    The rest are sorted ascending by creation time, keeping input order for
    equal timestamps.

    Args:
        notes: Notes in any order
        tz: Zone used to pick the calendar day; the process local zone when None

    Returns:
        Mapping from ``YYYY-MM-DD`` key to notes, keys in ascending order
    """
    grouped: dict[str, list[Note]] = {}
    dated = [note for note in notes if note.created_at is not None]
    for note in sorted(dated, key=lambda n: to_local(n.created_at, timezone.utc)):
        grouped.setdefault(date_key(note.created_at, tz), []).append(note)
    return {key: grouped[key] for key in sorted(grouped)}


def filter_groups(groups: Mapping[str, list[Note]], query: str) -> dict[str, list[Note]]:
    """Keep notes whose content contains `query`, ignoring case.

    A day left with no matching notes is dropped. An empty query returns the
    groups unchanged.
    """
    if not query:
        return dict(groups)

    needle = query.lower()
    filtered: dict[str, list[Note]] = {}
    for key, notes in groups.items():
        matching = [note for note in notes if needle in note.content.lower()]
        if matching:
            filtered[key] = matching
    return filtered


def format_display_date(key: str) -> str:
    """Turn a ``YYYY-MM-DD`` key into a header such as ``January 1, 2024``."""
    try:
        day = date.fromisoformat(key)
    except ValueError as e:
        logger.warning(f"Error parsing date key {key!r}: {e}")
        return key
    return f"{day.strftime('%B')} {day.day}, {day.year}"


def format_time(dt: datetime, tz: tzinfo | None = None) -> str:
    return to_local(dt, tz).strftime("%H:%M")
