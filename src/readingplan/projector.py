"""
Project a plan forward into a day-by-day schedule, and export it.

Works for either plan kind:
- Cycling plans march every list forward one chapter per day from the
  stored offsets
- Calendar plans march all lists together through the table from one
  starting day, ignoring each list's individual ahead/behind drift
"""

from collections.abc import Sequence
from datetime import date, timedelta

from . import calendar_engine, cycling
from .models import CalendarReadingPlan, CyclingReadingPlan, DayPlan, Reading, ReadingPlan
from .progress import PlanProgress


def generate_schedule(
    plan: ReadingPlan,
    start: Sequence[int] | int,
    days: int,
    today: date | None = None,
) -> list[DayPlan]:
    """
    Build `days` consecutive DayPlans beginning today.

    Args:
        plan: The plan to project.
        start: Cycling plans: the list offset vector.
               Calendar plans: the starting table index (unwrapped is fine).
        days: How many days to generate. Values below 1 give an empty schedule.
        today: Date of the first DayPlan. Defaults to date.today().

    Returns:
        DayPlans in date order. Cycling days are numbered 1, 2, 3...;
        calendar days carry the table's own day number (a schedule starting
        at index 199 is labelled 200, 201, 202...).
    """
    if today is None:
        today = date.today()

    schedule = []
    match plan:
        case CyclingReadingPlan():
            for d in range(days):
                schedule.append(DayPlan(
                    day=d + 1,
                    date=today + timedelta(days=d),
                    readings=tuple(cycling.readings_for_day(d, start, plan.lists)),
                ))
        case CalendarReadingPlan():
            for d in range(days):
                calendar_index = calendar_engine.wrap_day_index(start + d)
                schedule.append(DayPlan(
                    day=calendar_index + 1,
                    date=today + timedelta(days=d),
                    readings=tuple(
                        calendar_engine.readings_for_single_day(plan.calendar, calendar_index)
                    ),
                ))
        case _:
            raise TypeError(f"Unknown plan type: {type(plan).__name__}")

    return schedule


def schedule_start(plan: ReadingPlan, progress: PlanProgress, today: date) -> Sequence[int] | int:
    """
    Where a "full plan" schedule starts for the current progress.

    Cycling plans start from the stored offsets. Calendar plans start from
    today's calendar day, since the lists may each be at a different index.
    """
    match plan:
        case CyclingReadingPlan():
            return progress.list_offsets
        case CalendarReadingPlan():
            return calendar_engine.current_calendar_day_index(today)
    raise TypeError(f"Unknown plan type: {type(plan).__name__}")


def readings_for_today(plan: ReadingPlan, progress: PlanProgress) -> list[Reading]:
    """The single current assignment for every list (the "Today" view)."""
    match plan:
        case CyclingReadingPlan():
            return cycling.readings_for_day(0, progress.list_offsets, plan.lists)
        case CalendarReadingPlan():
            return calendar_engine.readings_for_indices(
                plan.calendar, progress.effective_day_indices
            )
    raise TypeError(f"Unknown plan type: {type(plan).__name__}")


# ---------------------------------------------------------------------------
# Markdown Export
# ---------------------------------------------------------------------------

# English names, so exports read the same whatever the process locale is
WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def format_day_date(day_date: date) -> str:
    """
    Long-form date, e.g. "Saturday, October 17, 2026".

    Syntax notes:
    - date.weekday() is 0 for Monday; date.month is 1-based
    - strftime's %A/%B would follow the process locale instead
    """
    weekday = WEEKDAY_NAMES[day_date.weekday()]
    month = MONTH_NAMES[day_date.month - 1]
    return f"{weekday}, {month} {day_date.day}, {day_date.year}"


def export_markdown(schedule: Sequence[DayPlan], title: str = "Bible Reading Plan") -> str:
    """
    Serialize a schedule as markdown: one heading and one table per day.

    Output depends only on the schedule (no clock reads), so the same
    schedule always produces byte-identical text.

    Example:
        # Bible Reading Plan

        ## Day 1 - Saturday, October 17, 2026
        | # | List | Reading |
        |---|------|---------|
        | 1 | Gospels | Matthew 1 |
    """
    lines = [f"# {title}", ""]
    for day_plan in schedule:
        lines.append(f"## Day {day_plan.day} - {format_day_date(day_plan.date)}")
        lines.append("| # | List | Reading |")
        lines.append("|---|------|---------|")
        for reading in day_plan.readings:
            lines.append(f"| {reading.list_id} | {reading.list_name} | {reading.reference} |")
        lines.append("")

    # "\n".join() puts a newline between lines (not after the last one)
    return "\n".join(lines)
