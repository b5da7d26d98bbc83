"""Shared fixtures for the readingplan tests."""

from datetime import date

import pytest

from readingplan import config
from readingplan.calendar_engine import build_calendar
from readingplan.models import CalendarReadingPlan, CyclingReadingPlan, ListMeta, ReadingList

TODAY = date(2026, 10, 17)

CALENDAR_META = (
    ListMeta(1, "Family (1)", "amber"),
    ListMeta(2, "Family (2)", "teal"),
    ListMeta(3, "Secret (1)", "indigo"),
    ListMeta(4, "Secret (2)", "red"),
)


def calendar_rows():
    """
    365 rows of raw readings, one distinct chapter per day per column.

    Column 0 walks Genesis, column 1 Matthew, column 2 Psalms, column 3 Acts;
    the chapter number is the 1-based day so every cell is unique.
    """
    return [
        [f"Genesis {d}", f"Matthew {d}", f"Psalm {d}", f"Acts {d}"]
        for d in range(1, 366)
    ]


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config at an empty temp directory so no real config.yaml leaks in."""
    monkeypatch.setattr(config, "get_config_path", lambda: tmp_path / "no-config.yaml")
    monkeypatch.setattr(config, "get_project_root", lambda: tmp_path)
    config.clear_cache()
    yield
    config.clear_cache()


@pytest.fixture
def psalms_list():
    return ReadingList.build(6, "Psalms", "orange", [("Psalms", 150)])


@pytest.fixture
def gospels_list():
    return ReadingList.build(1, "Gospels", "red", [
        ("Matthew", 28), ("Mark", 16), ("Luke", 24), ("John", 21),
    ])


@pytest.fixture
def small_cycling_plan(gospels_list, psalms_list):
    proverbs = ReadingList.build(7, "Proverbs", "rose", [("Proverbs", 31)])
    return CyclingReadingPlan(
        id="small",
        name="Small Cycling Plan",
        description="Three lists for tests.",
        lists=(gospels_list, psalms_list, proverbs),
    )


@pytest.fixture
def calendar_plan():
    return CalendarReadingPlan(
        id="mcheyne",
        name="Test Calendar",
        description="Synthetic 365-day calendar.",
        list_meta=CALENDAR_META,
        calendar=build_calendar(calendar_rows(), CALENDAR_META),
    )


@pytest.fixture
def write_config(tmp_path, monkeypatch):
    """Install a config.yaml holding the given YAML text."""
    def _write(text):
        path = tmp_path / "config.yaml"
        path.write_text(text)
        monkeypatch.setattr(config, "get_config_path", lambda: path)
        config.clear_cache()
    return _write
