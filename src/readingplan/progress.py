"""
Per-plan progress state and its persistence.

This module has two halves:
1. Pure state transitions on PlanProgress (advance, revert, date rollover)
2. A JSON-file repository that loads and saves that state per plan id

The two plan kinds deliberately handle the completion checklist differently:
- Cycling plans clear it when the date changes, and also as soon as every
  list is checked (progress-driven "days")
- Calendar plans keep it across date changes; advancing a list already
  clears that list's flag

Keep these policies separate. They look similar but aren't.
"""

import json
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import Protocol

from . import calendar_engine, cycling
from .models import CalendarReadingPlan, CyclingReadingPlan, ReadingPlan, get_list_count

# Bumped whenever the on-disk layout changes
STATE_VERSION = 2

# The pre-multi-plan state only ever belonged to this plan
LEGACY_PLAN_ID = "horner"

DEFAULT_DAYS_TO_GENERATE = 30


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlanProgress:
    """
    Mutable-by-replacement progress for one plan.

    Every transition returns a new PlanProgress (dataclasses.replace) rather
    than editing this one, so a snapshot someone else is holding never
    changes underneath them.

    Fields:
        start_date: Day 0 of the plan (used for "day N" display).
        list_offsets: Cycling plans: flat position per list, each in [0, total).
        effective_day_indices: Calendar plans: table index per list, unwrapped.
        completed_date: The date the completion flags belong to.
        completed: One checkbox per list.
    """

    start_date: date
    list_offsets: tuple[int, ...] = ()
    effective_day_indices: tuple[int, ...] = ()
    completed_date: date | None = None
    completed: tuple[bool, ...] = ()


def default_progress(plan: ReadingPlan, today: date) -> PlanProgress:
    """
    Fresh progress for a plan being activated today.

    Cycling lists start at offset 0. Calendar lists start on today's
    calendar day so a plan begun mid-year isn't "behind" from the start.
    """
    count = get_list_count(plan)
    flags = (False,) * count

    match plan:
        case CyclingReadingPlan():
            return PlanProgress(
                start_date=today,
                list_offsets=(0,) * count,
                completed_date=today,
                completed=flags,
            )
        case CalendarReadingPlan():
            today_index = calendar_engine.current_calendar_day_index(today)
            return PlanProgress(
                start_date=today,
                effective_day_indices=(today_index,) * count,
                completed_date=today,
                completed=flags,
            )
    raise TypeError(f"Unknown plan type: {type(plan).__name__}")


def days_elapsed(progress: PlanProgress, today: date) -> int:
    """Whole days since the plan's start date (negative before it)."""
    return (today - progress.start_date).days


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def roll_over(plan: ReadingPlan, progress: PlanProgress, today: date) -> PlanProgress:
    """
    Apply the date-rollover policy for today's checklist.

    Cycling: a new date clears every checkbox.
    Calendar: checkboxes survive the date change; only the stamp moves.
    """
    if progress.completed_date == today:
        return progress

    match plan:
        case CyclingReadingPlan():
            return replace(
                progress,
                completed_date=today,
                completed=(False,) * len(progress.completed),
            )
        case CalendarReadingPlan():
            return replace(progress, completed_date=today)
    raise TypeError(f"Unknown plan type: {type(plan).__name__}")


def mark_list(
    plan: ReadingPlan,
    progress: PlanProgress,
    index: int,
    completed: bool,
    today: date,
) -> PlanProgress:
    """
    Check (completed=True) or un-check list `index`.

    Cycling: checking advances the list one chapter, un-checking reverts it,
    and finishing the whole set clears the checklist.

    Calendar: checking advances the list one day. Un-checking does nothing;
    going back a day is the separate revert_list action.
    """
    progress = roll_over(plan, progress, today)

    match plan:
        case CyclingReadingPlan():
            offsets, flags = cycling.toggle_completion(
                plan.lists, progress.list_offsets, progress.completed, index, completed
            )
            return replace(progress, list_offsets=offsets, completed=flags)
        case CalendarReadingPlan():
            if not completed:
                return progress
            indices, flags = calendar_engine.advance(
                progress.effective_day_indices, progress.completed, index
            )
            return replace(progress, effective_day_indices=indices, completed=flags)
    raise TypeError(f"Unknown plan type: {type(plan).__name__}")


def revert_list(plan: ReadingPlan, progress: PlanProgress, index: int) -> PlanProgress:
    """
    Step list `index` back by one chapter (cycling) or one day (calendar).

    For cycling plans this is an explicit revert, independent of the
    checkbox: the list's flag is cleared and its offset moves back.
    """
    match plan:
        case CyclingReadingPlan():
            offsets = list(progress.list_offsets)
            offsets[index] = cycling.revert(plan.lists[index], offsets[index])
            flags = list(progress.completed)
            flags[index] = False
            return replace(progress, list_offsets=tuple(offsets), completed=tuple(flags))
        case CalendarReadingPlan():
            indices = calendar_engine.revert_day(progress.effective_day_indices, index)
            return replace(progress, effective_day_indices=indices)
    raise TypeError(f"Unknown plan type: {type(plan).__name__}")


def set_list_position(
    plan: CyclingReadingPlan,
    progress: PlanProgress,
    index: int,
    book_index: int,
    chapter: int,
) -> PlanProgress:
    """
    Move a cycling list to a specific book and chapter (settings editor).

    The caller clamps `chapter` into the book's range first.
    """
    reading_list = plan.lists[index]
    position = cycling.chapter_to_position(reading_list, book_index, chapter)

    offsets = list(progress.list_offsets)
    offsets[index] = cycling.wrap_position(reading_list, position)
    return replace(progress, list_offsets=tuple(offsets))


def set_day_index(progress: PlanProgress, index: int, day_index: int) -> PlanProgress:
    """Move a calendar list to a specific (unwrapped) day index."""
    indices = list(progress.effective_day_indices)
    indices[index] = day_index
    return replace(progress, effective_day_indices=tuple(indices))


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def progress_to_dict(progress: PlanProgress) -> dict:
    """Convert progress to JSON-safe primitives (dates become ISO strings)."""
    return {
        "start_date": progress.start_date.isoformat(),
        "list_offsets": list(progress.list_offsets),
        "effective_day_indices": list(progress.effective_day_indices),
        "completed_today": {
            "date": progress.completed_date.isoformat() if progress.completed_date else None,
            "lists": list(progress.completed),
        },
    }


def _fit(values: list, count: int, fill) -> tuple:
    """Pad or truncate a stored vector to the plan's list count."""
    values = list(values[:count])
    values.extend([fill] * (count - len(values)))
    return tuple(values)


def progress_from_dict(plan: ReadingPlan, raw: dict, today: date) -> PlanProgress:
    """
    Rebuild progress from stored primitives.

    Missing fields take their defaults, and vectors are fitted to the plan's
    current list count so a stored state never indexes past the plan.

    Raises:
        ValueError: If a stored date or number can't be parsed.
    """
    defaults = default_progress(plan, today)
    count = get_list_count(plan)

    start_date = raw.get("start_date")
    completed_today = raw.get("completed_today") or {}
    completed_date = completed_today.get("date")

    # Offsets are kept wrapped; day indices stay unwrapped by design
    offsets = raw.get("list_offsets") or []
    if isinstance(plan, CyclingReadingPlan):
        offsets = [
            int(offset) % reading_list.total_chapters
            for offset, reading_list in zip(offsets, plan.lists)
        ]

    indices = raw.get("effective_day_indices")
    if indices is None:
        indices = defaults.effective_day_indices

    return PlanProgress(
        start_date=date.fromisoformat(start_date) if start_date else defaults.start_date,
        list_offsets=_fit(offsets, count, 0) if defaults.list_offsets else (),
        effective_day_indices=(
            _fit([int(i) for i in indices], count, defaults.effective_day_indices[0])
            if defaults.effective_day_indices
            else ()
        ),
        completed_date=(
            date.fromisoformat(completed_date) if completed_date else defaults.completed_date
        ),
        completed=_fit([bool(flag) for flag in completed_today.get("lists") or []], count, False),
    )


def migrate_legacy_state(raw: dict) -> dict:
    """
    Convert a stored state blob to the current multi-plan layout.

    The first layout held a single plan's fields at the top level:
        {"startDate": "...", "listOffsets": [...], "translation": "...",
         "daysToGenerate": 30}

    The current layout keys progress by plan id:
        {"version": 2, "active_plan": "horner", "days_to_generate": 30,
         "plans": {"horner": {...}}}

    Blobs that are already current pass through unchanged. Display
    preferences such as the translation aren't part of plan progress and
    are dropped.
    """
    if raw.get("version") == STATE_VERSION or "plans" in raw:
        return raw

    if not any(key in raw for key in ("startDate", "listOffsets", "daysToGenerate")):
        return {"version": STATE_VERSION, "plans": {}}

    plan_state = {}
    if "startDate" in raw:
        plan_state["start_date"] = raw["startDate"]
    if "listOffsets" in raw:
        plan_state["list_offsets"] = raw["listOffsets"]

    return {
        "version": STATE_VERSION,
        "active_plan": LEGACY_PLAN_ID,
        "days_to_generate": raw.get("daysToGenerate", DEFAULT_DAYS_TO_GENERATE),
        "plans": {LEGACY_PLAN_ID: plan_state} if plan_state else {},
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class ProgressRepository(Protocol):
    """
    Where progress lives between runs.

    Syntax notes:
    - typing.Protocol describes an interface by shape ("structural typing")
    - Any class with these methods satisfies it; no inheritance needed
    """

    def load(self, plan: ReadingPlan) -> PlanProgress: ...

    def save(self, plan_id: str, progress: PlanProgress) -> None: ...

    def active_plan_id(self, default: str) -> str: ...

    def set_active_plan(self, plan_id: str) -> None: ...

    def reset(self, plan: ReadingPlan) -> PlanProgress: ...


class JsonProgressRepository:
    """
    Progress for every plan, stored in one JSON file.

    A missing file means "nothing saved yet". A corrupt file is reported and
    treated the same way, so a bad write never locks the reader out.
    """

    def __init__(self, path: Path, today: date | None = None):
        self.path = Path(path)
        self.today = today or date.today()
        self._data = self._read()

    def _read(self) -> dict:
        if not self.path.exists():
            return migrate_legacy_state({})

        try:
            raw = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            print(f"Warning: Could not read progress file {self.path}: {e}")
            print("Starting from default progress.")
            return migrate_legacy_state({})

        if not isinstance(raw, dict):
            print(f"Warning: Ignoring malformed progress file {self.path}")
            return migrate_legacy_state({})

        data = migrate_legacy_state(raw)
        if not isinstance(data.get("plans", {}), dict):
            print(f"Warning: Ignoring malformed progress file {self.path} (\"plans\" is not a mapping)")
            return migrate_legacy_state({})
        return data

    def _write(self) -> None:
        # parents=True creates missing parent directories, like `mkdir -p`
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Rename over the real file so readers never see a half-written one
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(self._data, indent=2) + "\n")
        tmp_path.replace(self.path)

    # -- plan progress --

    def load(self, plan: ReadingPlan) -> PlanProgress:
        """
        Stored progress for a plan, with today's rollover policy applied.

        Plans with nothing stored get default progress (not written until
        the first save).
        """
        raw = self._data.get("plans", {}).get(plan.id)
        if raw is None:
            return default_progress(plan, self.today)

        try:
            progress = progress_from_dict(plan, raw, self.today)
        except (AttributeError, TypeError, ValueError) as e:
            print(f"Warning: Stored progress for {plan.id!r} is invalid ({e}); using defaults.")
            return default_progress(plan, self.today)

        return roll_over(plan, progress, self.today)

    def save(self, plan_id: str, progress: PlanProgress) -> None:
        self._data.setdefault("plans", {})[plan_id] = progress_to_dict(progress)
        self._write()

    def reset(self, plan: ReadingPlan) -> PlanProgress:
        """Replace a plan's progress with defaults and persist them."""
        progress = default_progress(plan, self.today)
        self.save(plan.id, progress)
        return progress

    # -- settings shared across plans --

    def active_plan_id(self, default: str) -> str:
        plan_id = self._data.get("active_plan")
        return plan_id if isinstance(plan_id, str) and plan_id else default

    def set_active_plan(self, plan_id: str) -> None:
        self._data["active_plan"] = plan_id
        self._write()

    def days_to_generate(self, default: int = DEFAULT_DAYS_TO_GENERATE) -> int:
        stored = self._data.get("days_to_generate")
        if stored is None:
            return default
        try:
            return int(stored)
        except (TypeError, ValueError):
            print(f"Warning: Ignoring invalid days_to_generate {stored!r}; using {default}.")
            return default

    def set_days_to_generate(self, days: int) -> None:
        self._data["days_to_generate"] = days
        self._write()
