"""
Canonical Bible book data.

The 66 books of the Protestant canon in biblical order, with chapter counts.
Calendar parsing checks book names here; the position editor clamps
chapters here.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Book:
    """
    One book of the Bible.

    Syntax notes:
    - frozen=True makes instances immutable (assigning a field raises an error)
    - Frozen dataclasses are also hashable, so they can live in sets and dict keys
    """

    name: str
    chapters: int


# ---------------------------------------------------------------------------
# Canonical Order
# ---------------------------------------------------------------------------

ALL_BIBLE_BOOKS: tuple[Book, ...] = (
    # Old Testament (1-39)
    Book("Genesis", 50),
    Book("Exodus", 40),
    Book("Leviticus", 27),
    Book("Numbers", 36),
    Book("Deuteronomy", 34),
    Book("Joshua", 24),
    Book("Judges", 21),
    Book("Ruth", 4),
    Book("1 Samuel", 31),
    Book("2 Samuel", 24),
    Book("1 Kings", 22),
    Book("2 Kings", 25),
    Book("1 Chronicles", 29),
    Book("2 Chronicles", 36),
    Book("Ezra", 10),
    Book("Nehemiah", 13),
    Book("Esther", 10),
    Book("Job", 42),
    Book("Psalms", 150),
    Book("Proverbs", 31),
    Book("Ecclesiastes", 12),
    Book("Song of Solomon", 8),
    Book("Isaiah", 66),
    Book("Jeremiah", 52),
    Book("Lamentations", 5),
    Book("Ezekiel", 48),
    Book("Daniel", 12),
    Book("Hosea", 14),
    Book("Joel", 3),
    Book("Amos", 9),
    Book("Obadiah", 1),
    Book("Jonah", 4),
    Book("Micah", 7),
    Book("Nahum", 3),
    Book("Habakkuk", 3),
    Book("Zephaniah", 3),
    Book("Haggai", 2),
    Book("Zechariah", 14),
    Book("Malachi", 4),
    # New Testament (40-66)
    Book("Matthew", 28),
    Book("Mark", 16),
    Book("Luke", 24),
    Book("John", 21),
    Book("Acts", 28),
    Book("Romans", 16),
    Book("1 Corinthians", 16),
    Book("2 Corinthians", 13),
    Book("Galatians", 6),
    Book("Ephesians", 6),
    Book("Philippians", 4),
    Book("Colossians", 4),
    Book("1 Thessalonians", 5),
    Book("2 Thessalonians", 3),
    Book("1 Timothy", 6),
    Book("2 Timothy", 4),
    Book("Titus", 3),
    Book("Philemon", 1),
    Book("Hebrews", 13),
    Book("James", 5),
    Book("1 Peter", 5),
    Book("2 Peter", 3),
    Book("1 John", 5),
    Book("2 John", 1),
    Book("3 John", 1),
    Book("Jude", 1),
    Book("Revelation", 22),
)

# Name -> index lookup, built once at import time
# enumerate() yields (index, item) pairs
_BOOK_INDEX: dict[str, int] = {book.name: i for i, book in enumerate(ALL_BIBLE_BOOKS)}


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def get_book(name: str) -> Book | None:
    """Look up a book by its canonical name."""
    index = _BOOK_INDEX.get(name)
    return None if index is None else ALL_BIBLE_BOOKS[index]


def get_chapter_count(name: str) -> int | None:
    """Chapter count for a book, or None for an unknown name."""
    book = get_book(name)
    return book.chapters if book else None


def clamp_chapter(book: Book, chapter: int) -> int:
    """
    Clamp a requested chapter into [1, book.chapters].

    The position editor calls this before converting a (book, chapter) pair
    into a flat list position; the conversion itself never re-validates.
    """
    return max(1, min(chapter, book.chapters))

