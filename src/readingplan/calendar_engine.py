"""
Position engine for calendar plans (e.g. M'Cheyne's 365-day plan).

A calendar plan is a fixed table: day 1 through day 365, one reading per list
per day. Each list keeps its own "effective day index" so a reader can be
ahead on one list and behind on another.

Effective day indices are never wrapped when they change. Day index 365 means
"day 1 of a second pass" and -1 means "one day before day 1"; wrapping only
happens when the table is read. That keeps the ahead/behind delta honest.
"""

import re
from collections.abc import Iterable, Sequence
from datetime import date

from .books import get_chapter_count
from .models import CALENDAR_DAYS, CalendarDayEntry, ListMeta, PlanDataError, Reading


# ---------------------------------------------------------------------------
# Day Index Arithmetic
# ---------------------------------------------------------------------------

def wrap_day_index(day_index: int) -> int:
    """Wrap any integer into the table's range 0..364."""
    return day_index % CALENDAR_DAYS


def current_calendar_day_index(today: date) -> int:
    """
    0-based table index for a calendar date (January 1 -> 0).

    Leap years have 366 days but the table has 365, so December 31 of a
    leap year reuses the last slot.

    Syntax notes:
    - date.timetuple().tm_yday is the 1-based day of the year
    """
    return min(today.timetuple().tm_yday - 1, CALENDAR_DAYS - 1)


def day_delta(effective_index: int, today: date) -> int:
    """
    Signed ahead/behind count for one list.

    Positive means the list is ahead of the calendar, negative behind.
    """
    return effective_index - current_calendar_day_index(today)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def readings_for_indices(
    calendar: Sequence[CalendarDayEntry],
    day_indices: Sequence[int],
) -> list[Reading]:
    """One reading per list, each list read at its own (wrapped) day index."""
    return [
        calendar[wrap_day_index(day_index)].readings[list_index]
        for list_index, day_index in enumerate(day_indices)
    ]


def readings_for_single_day(
    calendar: Sequence[CalendarDayEntry],
    day_index: int,
) -> list[Reading]:
    """Every list's reading for one shared day index (used by forward schedules)."""
    return list(calendar[wrap_day_index(day_index)].readings)


# ---------------------------------------------------------------------------
# Advance / Revert
# ---------------------------------------------------------------------------

def advance(
    day_indices: Sequence[int],
    completed: Sequence[bool],
    index: int,
) -> tuple[tuple[int, ...], tuple[bool, ...]]:
    """
    Mark list `index` read: its day index moves forward by one.

    No wrap is applied here. The list's completion flag is cleared because
    the list is now showing the next day's reading.

    Returns:
        (new day indices, new completion flags)
    """
    new_indices = list(day_indices)
    new_indices[index] += 1

    new_flags = list(completed)
    new_flags[index] = False

    return (tuple(new_indices), tuple(new_flags))


def revert_day(day_indices: Sequence[int], index: int) -> tuple[int, ...]:
    """Move list `index` back one day. No wrap is applied."""
    new_indices = list(day_indices)
    new_indices[index] -= 1
    return tuple(new_indices)


# ---------------------------------------------------------------------------
# Parsing Static Calendar Data
# ---------------------------------------------------------------------------

# Raw source data abbreviates some books; map them to canonical names
BOOK_NAME_MAP = {
    "1Samuel": "1 Samuel",
    "2Samuel": "2 Samuel",
    "1Kings": "1 Kings",
    "2Kings": "2 Kings",
    "1Chronicles": "1 Chronicles",
    "2Chronicles": "2 Chronicles",
    "1Corinthians": "1 Corinthians",
    "2Corinthians": "2 Corinthians",
    "1Timothy": "1 Timothy",
    "2Timothy": "2 Timothy",
    "1Peter": "1 Peter",
    "2Peter": "2 Peter",
    "1John": "1 John",
    "2John": "2 John",
    "3John": "3 John",
    "1 Thes": "1 Thessalonians",
    "2 Thes": "2 Thessalonians",
    "SongOfSongs": "Song of Solomon",
    "Psalm": "Psalms",
}

# Regex breakdown:
# - (.+?)                  book name (non-greedy so the chapter isn't swallowed)
# - \s+(\d+)               chapter
# - (?::(\d+)-(\d+)        optional verse range ":1-38"
# - |-(\d+))?              ...or optional chapter range "-10"
READING_PATTERN = re.compile(r"^(.+?)\s+(\d+)(?::(\d+)-(\d+)|-(\d+))?$")


def normalize_book_name(raw: str) -> str:
    return BOOK_NAME_MAP.get(raw, raw)


def parse_reading(raw: str, meta: ListMeta) -> Reading:
    """
    Parse one raw calendar cell into a Reading.

    Formats handled:
        "Genesis 1"       -> Genesis 1
        "Genesis 9-10"    -> Genesis 9, end_chapter 10
        "Luke 1:1-38"     -> Luke 1, verses 1-38
        "Psalm 119:1-24"  -> Psalms 119, verses 1-24

    Raises:
        PlanDataError: If the cell doesn't match any of these shapes, or
            names a book that isn't in the canon.
    """
    match = READING_PATTERN.match(raw.strip())
    if not match:
        raise PlanDataError(f"Cannot parse calendar reading: {raw!r}")

    book, chapter, start_verse, end_verse, end_chapter = match.groups()
    book = normalize_book_name(book)
    if get_chapter_count(book) is None:
        raise PlanDataError(f"Unknown book in calendar reading: {raw!r}")

    return Reading(
        list_id=meta.id,
        list_name=meta.name,
        list_color=meta.color,
        book=book,
        chapter=int(chapter),
        end_chapter=int(end_chapter) if end_chapter else None,
        start_verse=int(start_verse) if start_verse else None,
        end_verse=int(end_verse) if end_verse else None,
    )


def build_calendar(
    raw_days: Iterable[Sequence[str]],
    list_meta: Sequence[ListMeta],
) -> tuple[CalendarDayEntry, ...]:
    """
    Parse a 365-row table of raw reading strings, once, into CalendarDayEntry rows.

    Args:
        raw_days: One row per day; row i holds one raw string per list.
        list_meta: Column metadata, in list order.

    Raises:
        PlanDataError: On a row of the wrong width, a wrong day count,
            or an unparseable cell.
    """
    entries = []
    for day_number, row in enumerate(raw_days, start=1):
        if len(row) != len(list_meta):
            raise PlanDataError(
                f"Calendar day {day_number} has {len(row)} readings, "
                f"expected {len(list_meta)}"
            )
        readings = tuple(parse_reading(cell, meta) for cell, meta in zip(row, list_meta))
        entries.append(CalendarDayEntry(readings=readings))

    if len(entries) != CALENDAR_DAYS:
        raise PlanDataError(
            f"Calendar has {len(entries)} days, expected {CALENDAR_DAYS}"
        )

    return tuple(entries)
