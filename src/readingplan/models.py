"""
Data model for reading plans.

Two plan shapes share this module:
- CyclingReadingPlan: N independent lists of books, each a circular buffer of chapters
- CalendarReadingPlan: a fixed 365-day table with one reading per list per day

Everything here is immutable. Static plan data is validated when it is built,
so a broken list or calendar fails at load time instead of mid-schedule.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from .books import Book

# Length of every calendar plan's lookup table
CALENDAR_DAYS = 365


class PlanDataError(ValueError):
    """Static plan data is malformed (empty list, wrong calendar shape, bad reading)."""


# ---------------------------------------------------------------------------
# Readings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Reading:
    """
    A resolved passage assignment for one list on one day.

    Range fields are only set for calendar entries such as "Genesis 9-10"
    (end_chapter) or "Luke 1:1-38" (start_verse + end_verse). Cycling plans
    always produce exactly one whole chapter.
    """

    list_id: int
    list_name: str
    list_color: str
    book: str
    chapter: int
    end_chapter: int | None = None
    start_verse: int | None = None
    end_verse: int | None = None

    @property
    def reference(self) -> str:
        """
        Human-readable reference.

        Examples:
            "Luke 1:1-38"   (verse range)
            "Genesis 9-10"  (chapter range)
            "Psalms 23"     (whole chapter)
        """
        if self.start_verse is not None and self.end_verse is not None:
            return f"{self.book} {self.chapter}:{self.start_verse}-{self.end_verse}"
        if self.end_chapter is not None and self.end_chapter != self.chapter:
            return f"{self.book} {self.chapter}-{self.end_chapter}"
        return f"{self.book} {self.chapter}"


# ---------------------------------------------------------------------------
# Cycling Plans
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReadingList:
    """
    One list of a cycling plan.

    The books form a circular buffer addressed by position 0..total_chapters-1.
    total_chapters is derived from the books, never passed in, so it can't drift.
    """

    id: int
    name: str
    color: str
    books: tuple[Book, ...]
    # init=False: not a constructor argument, filled in by __post_init__
    total_chapters: int = field(init=False)

    def __post_init__(self):
        if not self.books:
            raise PlanDataError(f"Reading list {self.name!r} has no books")

        total = sum(book.chapters for book in self.books)
        if total <= 0 or any(book.chapters <= 0 for book in self.books):
            raise PlanDataError(
                f"Reading list {self.name!r} has non-positive chapter counts"
            )

        # Frozen dataclasses block normal assignment, even in __post_init__.
        # object.__setattr__ bypasses the frozen check for this one derived field.
        object.__setattr__(self, "total_chapters", total)

    @classmethod
    def build(cls, id: int, name: str, color: str, books) -> "ReadingList":
        """Build a list from any iterable of Book or (name, chapters) pairs."""
        normalized = tuple(
            book if isinstance(book, Book) else Book(*book) for book in books
        )
        return cls(id=id, name=name, color=color, books=normalized)


@dataclass(frozen=True)
class CyclingReadingPlan:
    id: str
    name: str
    description: str
    lists: tuple[ReadingList, ...]
    kind: Literal["cycling"] = field(default="cycling", init=False)

    def __post_init__(self):
        if not self.lists:
            raise PlanDataError(f"Cycling plan {self.id!r} has no reading lists")


# ---------------------------------------------------------------------------
# Calendar Plans
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ListMeta:
    """Display metadata for one column of a calendar plan."""

    id: int
    name: str
    color: str


@dataclass(frozen=True)
class CalendarDayEntry:
    readings: tuple[Reading, ...]


@dataclass(frozen=True)
class CalendarReadingPlan:
    id: str
    name: str
    description: str
    list_meta: tuple[ListMeta, ...]
    calendar: tuple[CalendarDayEntry, ...]
    kind: Literal["calendar"] = field(default="calendar", init=False)

    def __post_init__(self):
        if len(self.calendar) != CALENDAR_DAYS:
            raise PlanDataError(
                f"Calendar plan {self.id!r} has {len(self.calendar)} days, "
                f"expected {CALENDAR_DAYS}"
            )

        list_count = len(self.list_meta)
        for day_index, entry in enumerate(self.calendar):
            if len(entry.readings) != list_count:
                raise PlanDataError(
                    f"Calendar plan {self.id!r} day {day_index + 1} has "
                    f"{len(entry.readings)} readings, expected {list_count}"
                )


# The tagged union. Branch on it with `match` against the concrete class.
ReadingPlan = CyclingReadingPlan | CalendarReadingPlan


def get_list_count(plan: ReadingPlan) -> int:
    """Number of parallel reading lists in a plan."""
    match plan:
        case CyclingReadingPlan():
            return len(plan.lists)
        case CalendarReadingPlan():
            return len(plan.list_meta)
    raise TypeError(f"Unknown plan type: {type(plan).__name__}")


# ---------------------------------------------------------------------------
# Schedules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DayPlan:
    """
    One day of a projected schedule.

    `day` is the label shown to the reader: a 1-based sequence number for
    cycling plans, the calendar's own day number (1-365) for calendar plans.
    """

    day: int
    date: date
    readings: tuple[Reading, ...]
