"""
Built-in reading plans.

- Horner's Bible Reading System: ten lists of different lengths that cycle
  independently, so the daily combination keeps changing for years
- M'Cheyne's Daily Bible: a 365-day calendar with four readings a day
  (two "Family", two "Secret")

The Horner lists are compiled in. The M'Cheyne table is a YAML data file
shipped in `data/` (or a replacement named in config), read the first
time it's needed:

    days:
      - ["Genesis 1", "Matthew 1", "Ezra 1", "Acts 1"]
      - ["Genesis 2", "Matthew 2", "Ezra 2", "Acts 2"]
      ...  # 365 rows in total
"""

from pathlib import Path

import yaml

from . import config
from .calendar_engine import build_calendar
from .models import CalendarReadingPlan, CyclingReadingPlan, ListMeta, PlanDataError, ReadingList, ReadingPlan

DEFAULT_PLAN_ID = "horner"
MCHEYNE_PLAN_ID = "mcheyne"

# Bundled with the package (see package-data in pyproject.toml)
MCHEYNE_DATA_PATH = Path(__file__).parent / "data" / "mcheyne.yaml"


# ---------------------------------------------------------------------------
# Horner
# ---------------------------------------------------------------------------

HORNER_LISTS: tuple[ReadingList, ...] = (
    ReadingList.build(1, "Gospels", "red", [
        ("Matthew", 28), ("Mark", 16), ("Luke", 24), ("John", 21),
    ]),
    ReadingList.build(2, "Pentateuch", "amber", [
        ("Genesis", 50), ("Exodus", 40), ("Leviticus", 27), ("Numbers", 36),
        ("Deuteronomy", 34),
    ]),
    ReadingList.build(3, "Epistles I", "emerald", [
        ("Romans", 16), ("1 Corinthians", 16), ("2 Corinthians", 13),
        ("Galatians", 6), ("Ephesians", 6), ("Philippians", 4),
        ("Colossians", 4), ("Hebrews", 13),
    ]),
    ReadingList.build(4, "Epistles II", "purple", [
        ("1 Thessalonians", 5), ("2 Thessalonians", 3), ("1 Timothy", 6),
        ("2 Timothy", 4), ("Titus", 3), ("Philemon", 1), ("James", 5),
        ("1 Peter", 5), ("2 Peter", 3), ("1 John", 5), ("2 John", 1),
        ("3 John", 1), ("Jude", 1), ("Revelation", 22),
    ]),
    ReadingList.build(5, "Wisdom", "yellow", [
        ("Job", 42), ("Ecclesiastes", 12), ("Song of Solomon", 8),
    ]),
    ReadingList.build(6, "Psalms", "orange", [("Psalms", 150)]),
    ReadingList.build(7, "Proverbs", "rose", [("Proverbs", 31)]),
    ReadingList.build(8, "History", "teal", [
        ("Joshua", 24), ("Judges", 21), ("Ruth", 4), ("1 Samuel", 31),
        ("2 Samuel", 24), ("1 Kings", 22), ("2 Kings", 25),
        ("1 Chronicles", 29), ("2 Chronicles", 36), ("Ezra", 10),
        ("Nehemiah", 13), ("Esther", 10),
    ]),
    ReadingList.build(9, "Prophets", "indigo", [
        ("Isaiah", 66), ("Jeremiah", 52), ("Lamentations", 5), ("Ezekiel", 48),
        ("Daniel", 12), ("Hosea", 14), ("Joel", 3), ("Amos", 9), ("Obadiah", 1),
        ("Jonah", 4), ("Micah", 7), ("Nahum", 3), ("Habakkuk", 3),
        ("Zephaniah", 3), ("Haggai", 2), ("Zechariah", 14), ("Malachi", 4),
    ]),
    ReadingList.build(10, "Acts", "sky", [("Acts", 28)]),
)

HORNER_PLAN = CyclingReadingPlan(
    id=DEFAULT_PLAN_ID,
    name="Horner's Bible Reading System",
    description="10 independent lists that cycle at different lengths, "
                "creating unique combinations for years.",
    lists=HORNER_LISTS,
)


# ---------------------------------------------------------------------------
# M'Cheyne
# ---------------------------------------------------------------------------

MCHEYNE_LIST_META: tuple[ListMeta, ...] = (
    ListMeta(1, "Family (1)", "amber"),
    ListMeta(2, "Family (2)", "teal"),
    ListMeta(3, "Secret (1)", "indigo"),
    ListMeta(4, "Secret (2)", "red"),
)


def load_calendar_plan(
    path: Path,
    plan_id: str = MCHEYNE_PLAN_ID,
    name: str = "M'Cheyne's Daily Bible",
    description: str = "Robert Murray M'Cheyne's original 365-day plan with "
                       "4 daily readings - Family and Secret.",
    list_meta: tuple[ListMeta, ...] = MCHEYNE_LIST_META,
) -> CalendarReadingPlan:
    """
    Build a calendar plan from a YAML data file.

    The file holds either a top-level list of rows or a mapping with a
    `days` key. Each row is one day: one raw reading string per list.

    Raises:
        FileNotFoundError: If the data file doesn't exist.
        PlanDataError: If the data has the wrong shape or an unparseable reading.
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise PlanDataError(f"Calendar data in {path} is not valid YAML: {e}") from e

    # isinstance() checks the runtime type; YAML gives back plain dicts/lists
    rows = data.get("days") if isinstance(data, dict) else data
    if not isinstance(rows, list):
        raise PlanDataError(f"Calendar data in {path} must be a list of days")

    for number, row in enumerate(rows, start=1):
        if not isinstance(row, list):
            raise PlanDataError(f"Day {number} in {path} must be a list of readings, got {row!r}")

    # YAML reads a bare `Acts 1` cell as a string but `1` as an int; normalize
    raw_days = [[str(cell) for cell in row] for row in rows]

    return CalendarReadingPlan(
        id=plan_id,
        name=name,
        description=description,
        list_meta=list_meta,
        calendar=build_calendar(raw_days, list_meta),
    )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

# Loaded calendar plans, keyed by data file path
_calendar_cache: dict[Path, CalendarReadingPlan] = {}


def get_mcheyne_path() -> Path:
    """
    Location of the M'Cheyne data file.

    Falls back to the bundled table when `calendar.mcheyne_path` isn't set.
    Relative paths are resolved against the project root, the same way the
    config file itself is found.
    """
    configured = config.get("calendar.mcheyne_path")
    if not configured:
        return MCHEYNE_DATA_PATH

    path = Path(configured).expanduser()
    if not path.is_absolute():
        path = config.get_project_root() / path
    return path


def get_plans() -> list[ReadingPlan]:
    """
    All plans available right now.

    The calendar plan is only listed when its data file exists. Broken data
    still raises: a half-parsed calendar is worse than a missing one.
    """
    plans: list[ReadingPlan] = [HORNER_PLAN]

    path = get_mcheyne_path()
    if path.exists():
        if path not in _calendar_cache:
            _calendar_cache[path] = load_calendar_plan(path)
        plans.append(_calendar_cache[path])

    return plans


def get_plan_by_id(plan_id: str) -> ReadingPlan | None:
    """Find an available plan by id, or None."""
    # next() returns the first match from the generator, or the default (None)
    return next((plan for plan in get_plans() if plan.id == plan_id), None)
