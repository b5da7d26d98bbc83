"""
Command-line entry point for the reading plan tracker.

Typical day:
    python -m readingplan today        # what to read
    python -m readingplan check 3      # finished list 3
    python -m readingplan schedule --days 30 --export plan.md

Run with: uv run python -m readingplan
"""

import argparse
import sys
from datetime import date
from pathlib import Path

from . import calendar_engine, config, progress as progress_ops
from .books import clamp_chapter
from .models import CALENDAR_DAYS, CalendarReadingPlan, CyclingReadingPlan, PlanDataError, ReadingPlan, get_list_count
from .plans import get_plan_by_id, get_plans
from .progress import JsonProgressRepository
from .projector import export_markdown, generate_schedule, readings_for_today, schedule_start


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Syntax notes:
    - add_subparsers() gives git-style commands ("today", "check 3", ...)
    - dest="command" stores the chosen command name on the Namespace
    - Options added to the top-level parser go before the command name

    Returns:
        Namespace object with parsed arguments as attributes.
    """
    parser = argparse.ArgumentParser(
        description="Track progress through Bible reading plans."
    )
    parser.add_argument(
        "--state",
        type=Path,
        default=None,
        help="Progress file to use (default: storage.state_path from config).",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        metavar="YYYY-MM-DD",
        help="Treat this date as today.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("plans", help="List available reading plans.")

    use = subparsers.add_parser("use", help="Switch the active reading plan.")
    use.add_argument("plan_id")

    subparsers.add_parser("today", help="Show today's readings.")

    check = subparsers.add_parser("check", help="Mark a list as read today.")
    check.add_argument("list_number", type=int, help="1-based list number.")

    uncheck = subparsers.add_parser("uncheck", help="Un-mark a list.")
    uncheck.add_argument("list_number", type=int, help="1-based list number.")

    revert = subparsers.add_parser("revert", help="Move a list back one chapter or day.")
    revert.add_argument("list_number", type=int, help="1-based list number.")

    set_position = subparsers.add_parser("set", help="Move a list to a specific position.")
    set_position.add_argument("list_number", type=int, help="1-based list number.")
    set_position.add_argument("book", nargs="?", help="Book name (cycling plans).")
    set_position.add_argument("chapter", nargs="?", type=int, default=1,
                              help="Chapter within the book (default: 1).")
    set_position.add_argument("--day", type=int, default=None,
                              help="Calendar day number, 1-365 (calendar plans).")

    schedule = subparsers.add_parser("schedule", help="Project the plan forward.")
    schedule.add_argument("--days", type=int, default=None,
                          help="Number of days (default: plan.days_to_generate).")
    schedule.add_argument("--export", type=Path, default=None, metavar="PATH",
                          help="Write the schedule as markdown to PATH.")

    subparsers.add_parser("reset", help="Reset the active plan's progress.")

    return parser.parse_args(argv)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _list_index(plan: ReadingPlan, list_number: int) -> int | None:
    """Convert a 1-based list number to an index, or None if out of range."""
    count = get_list_count(plan)
    if 1 <= list_number <= count:
        return list_number - 1
    print(f"Error: {plan.name} has lists 1-{count}, not {list_number}.")
    return None


def print_today(plan: ReadingPlan, progress: progress_ops.PlanProgress, today: date) -> None:
    """Print today's readings with a checkbox per list."""
    print(f"{plan.name} - {today.isoformat()}")

    match plan:
        case CyclingReadingPlan():
            day_number = progress_ops.days_elapsed(progress, today) + 1
            print(f"Day {day_number} (started {progress.start_date.isoformat()})")
        case CalendarReadingPlan():
            print(f"Calendar day {calendar_engine.current_calendar_day_index(today) + 1}")
    print()

    readings = readings_for_today(plan, progress)
    for i, reading in enumerate(readings):
        mark = "x" if progress.completed[i] else " "
        line = f"  [{mark}] {reading.list_id:>2}. {reading.list_name:<16} {reading.reference}"

        # Calendar lists can drift; show how far from today's calendar day
        if isinstance(plan, CalendarReadingPlan):
            delta = calendar_engine.day_delta(progress.effective_day_indices[i], today)
            if delta > 0:
                line += f"  ({delta} ahead)"
            elif delta < 0:
                line += f"  ({-delta} behind)"

        print(line)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    args = parse_args(argv)
    today = args.date or date.today()
    state_path = args.state or config.get_state_path()

    try:
        repo = JsonProgressRepository(state_path, today=today)
        plan_id = repo.active_plan_id(config.get("plan.default"))
        plan = get_plan_by_id(plan_id)
    except PlanDataError as e:
        print(f"Error: Reading plan data is invalid: {e}")
        return 1

    if args.command == "plans":
        for available in get_plans():
            marker = "*" if available.id == plan_id else " "
            print(f"{marker} {available.id:<10} {available.name} ({get_list_count(available)} lists)")
            print(f"      {available.description}")
        return 0

    if args.command == "use":
        chosen = get_plan_by_id(args.plan_id)
        if chosen is None:
            print(f"Error: Unknown plan {args.plan_id!r}. Run `plans` to list them.")
            return 1
        repo.set_active_plan(chosen.id)
        # Persist the starting point so the plan's start date is today
        repo.save(chosen.id, repo.load(chosen))
        print(f"Active plan: {chosen.name}")
        return 0

    if plan is None:
        print(f"Error: Active plan {plan_id!r} is not available.")
        print("Run `plans` to list available plans, then `use PLAN_ID`.")
        return 1

    progress = repo.load(plan)

    if args.command == "today":
        print_today(plan, progress, today)
        return 0

    if args.command in ("check", "uncheck", "revert"):
        index = _list_index(plan, args.list_number)
        if index is None:
            return 1

        if args.command == "revert":
            progress = progress_ops.revert_list(plan, progress, index)
        elif args.command == "uncheck" and isinstance(plan, CalendarReadingPlan):
            print("Calendar plans don't un-check; use `revert` to go back a day.")
            return 1
        else:
            progress = progress_ops.mark_list(
                plan, progress, index, args.command == "check", today
            )

        repo.save(plan.id, progress)
        print_today(plan, progress, today)
        return 0

    if args.command == "set":
        index = _list_index(plan, args.list_number)
        if index is None:
            return 1

        match plan:
            case CyclingReadingPlan():
                if args.day is not None:
                    print("Error: --day is for calendar plans; give a book and chapter instead.")
                    return 1
                if not args.book:
                    print("Error: Give a book name, e.g. `set 1 Mark 3`.")
                    return 1
                reading_list = plan.lists[index]
                names = [book.name.lower() for book in reading_list.books]
                if args.book.lower() not in names:
                    print(f"Error: {args.book!r} is not in {reading_list.name}.")
                    print(f"Books: {', '.join(book.name for book in reading_list.books)}")
                    return 1
                book_index = names.index(args.book.lower())
                chapter = clamp_chapter(reading_list.books[book_index], args.chapter)
                progress = progress_ops.set_list_position(
                    plan, progress, index, book_index, chapter
                )
            case CalendarReadingPlan():
                if args.book is not None:
                    print(f"Error: {plan.name} moves by calendar day, not by book.")
                    print(f"Use `set {args.list_number} --day N` with N from 1 to {CALENDAR_DAYS}.")
                    return 1
                if args.day is None:
                    print("Error: Give a calendar day, e.g. `set 1 --day 120`.")
                    return 1
                if not 1 <= args.day <= CALENDAR_DAYS:
                    print(f"Error: --day must be between 1 and {CALENDAR_DAYS}, not {args.day}.")
                    return 1
                progress = progress_ops.set_day_index(progress, index, args.day - 1)

        repo.save(plan.id, progress)
        print_today(plan, progress, today)
        return 0

    if args.command == "schedule":
        days = args.days
        if days is None:
            days = repo.days_to_generate(config.get("plan.days_to_generate"))
        if days < 1:
            print("Error: --days must be at least 1.")
            return 1

        schedule = generate_schedule(
            plan, schedule_start(plan, progress, today), days, today=today
        )
        markdown = export_markdown(schedule, title=config.get("export.title"))

        if args.export is None:
            print(markdown)
            return 0

        export_path = args.export.expanduser()
        if not export_path.is_absolute() and export_path.parent == Path("."):
            export_path = config.get_export_dir() / export_path
        export_path.parent.mkdir(parents=True, exist_ok=True)
        export_path.write_text(markdown + "\n")
        print(f"Schedule saved to: {export_path}")
        return 0

    if args.command == "reset":
        repo.reset(plan)
        print(f"Progress for {plan.name} reset.")
        return 0

    # argparse rejects unknown commands before we get here
    return 1


if __name__ == "__main__":
    sys.exit(main())
