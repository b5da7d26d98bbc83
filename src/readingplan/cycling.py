"""
Position engine for cycling plans (e.g. Horner's ten lists).

Each list is a circular buffer of chapters. A list's progress is a single
integer offset into that buffer; checking a list off moves it forward one
chapter and un-checking moves it back.

All functions are pure: they take the current offsets/flags and return new
ones. Persisting the result is the caller's job.
"""

from collections.abc import Sequence

from .models import Reading, ReadingList


# ---------------------------------------------------------------------------
# Position <-> Chapter
# ---------------------------------------------------------------------------

def wrap_position(reading_list: ReadingList, position: int) -> int:
    """
    Wrap any integer into [0, total_chapters).

    Python's % already returns a non-negative result for a positive divisor
    (-1 % 150 == 149), unlike the remainder operator in C-family languages.
    """
    return position % reading_list.total_chapters


def position_to_book_index(reading_list: ReadingList, position: int) -> tuple[int, int]:
    """
    Resolve a flat position into (book_index, chapter).

    Walks the list's books accumulating chapter counts until the wrapped
    position falls inside a book's range.

    Args:
        reading_list: The list to resolve against.
        position: Any integer; negative and oversized values wrap.

    Returns:
        (index into reading_list.books, 1-based chapter)
    """
    wrapped = wrap_position(reading_list, position)
    cumulative = 0
    for book_index, book in enumerate(reading_list.books):
        if wrapped < cumulative + book.chapters:
            return (book_index, wrapped - cumulative + 1)
        cumulative += book.chapters

    # Unreachable: total_chapters is the sum of the books' chapters
    raise AssertionError(f"Position {position} not found in {reading_list.name!r}")


def position_to_chapter(reading_list: ReadingList, position: int) -> tuple[str, int]:
    """Resolve a flat position into (book_name, chapter)."""
    book_index, chapter = position_to_book_index(reading_list, position)
    return (reading_list.books[book_index].name, chapter)


def chapter_to_position(reading_list: ReadingList, book_index: int, chapter: int) -> int:
    """
    Inverse of position_to_chapter.

    Sums the chapters of every book before book_index and adds chapter - 1.
    The caller clamps chapter into the book's range first (see books.clamp_chapter).
    """
    before = sum(book.chapters for book in reading_list.books[:book_index])
    return before + (chapter - 1)


# ---------------------------------------------------------------------------
# Readings
# ---------------------------------------------------------------------------

def reading_at(reading_list: ReadingList, position: int) -> Reading:
    """Whole-chapter Reading for one list at one position."""
    book, chapter = position_to_chapter(reading_list, position)
    return Reading(
        list_id=reading_list.id,
        list_name=reading_list.name,
        list_color=reading_list.color,
        book=book,
        chapter=chapter,
    )


def readings_for_day(
    day_offset: int,
    list_offsets: Sequence[int],
    lists: Sequence[ReadingList],
) -> list[Reading]:
    """
    Readings for every list, day_offset days after the stored offsets.

    Offsets already encode how far each list has progressed, so day_offset=0
    is always "the current chapter of each list".
    """
    # zip() pairs each list with its offset: (list0, offset0), (list1, offset1), ...
    return [
        reading_at(reading_list, offset + day_offset)
        for reading_list, offset in zip(lists, list_offsets)
    ]


# ---------------------------------------------------------------------------
# Advance / Revert
# ---------------------------------------------------------------------------

def advance(reading_list: ReadingList, offset: int, completed: bool = True) -> int:
    """
    Move a list's offset in response to its checkbox.

    Checking (completed=True) moves forward one chapter; un-checking moves
    back one. Both wrap around the list's length.
    """
    total = reading_list.total_chapters
    if completed:
        return (offset + 1) % total
    return (offset - 1 + total) % total


def revert(reading_list: ReadingList, offset: int) -> int:
    """Move a list's offset back one chapter."""
    return advance(reading_list, offset, completed=False)


def toggle_completion(
    lists: Sequence[ReadingList],
    list_offsets: Sequence[int],
    completed: Sequence[bool],
    index: int,
    mark: bool,
) -> tuple[tuple[int, ...], tuple[bool, ...]]:
    """
    Set list `index`'s checkbox to `mark` and move its offset to match.

    When the change leaves every list checked, the whole completion vector
    is cleared at once: a cycling plan starts a new "day" as soon as the
    current set is finished, without waiting for the calendar date to change.

    Setting a checkbox to the state it already has changes nothing.

    Returns:
        (new offsets, new completion flags)
    """
    offsets = tuple(list_offsets)
    flags = tuple(completed)

    if flags[index] == mark:
        return (offsets, flags)

    new_offsets = list(offsets)
    new_offsets[index] = advance(lists[index], offsets[index], completed=mark)

    new_flags = list(flags)
    new_flags[index] = mark
    if all(new_flags):
        new_flags = [False] * len(new_flags)

    return (tuple(new_offsets), tuple(new_flags))
