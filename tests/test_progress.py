import json
from dataclasses import replace
from datetime import date, timedelta

from readingplan import progress as progress_ops
from readingplan.progress import JsonProgressRepository, PlanProgress, migrate_legacy_state

from conftest import TODAY

TOMORROW = TODAY + timedelta(days=1)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

def test_default_progress_cycling(small_cycling_plan):
    progress = progress_ops.default_progress(small_cycling_plan, TODAY)

    assert progress.start_date == TODAY
    assert progress.list_offsets == (0, 0, 0)
    assert progress.effective_day_indices == ()
    assert progress.completed == (False, False, False)


def test_default_progress_calendar_starts_on_todays_day(calendar_plan):
    progress = progress_ops.default_progress(calendar_plan, date(2026, 7, 19))

    assert progress.effective_day_indices == (199, 199, 199, 199)
    assert progress.list_offsets == ()


def test_days_elapsed(small_cycling_plan):
    progress = progress_ops.default_progress(small_cycling_plan, TODAY)
    assert progress_ops.days_elapsed(progress, TODAY + timedelta(days=9)) == 9


# ---------------------------------------------------------------------------
# Cycling transitions
# ---------------------------------------------------------------------------

def test_cycling_check_and_uncheck(small_cycling_plan):
    progress = progress_ops.default_progress(small_cycling_plan, TODAY)

    checked = progress_ops.mark_list(small_cycling_plan, progress, 0, True, TODAY)
    assert checked.list_offsets == (1, 0, 0)
    assert checked.completed == (True, False, False)

    unchecked = progress_ops.mark_list(small_cycling_plan, checked, 0, False, TODAY)
    assert unchecked.list_offsets == (0, 0, 0)
    assert unchecked.completed == (False, False, False)


def test_cycling_finishing_the_set_clears_the_checklist(small_cycling_plan):
    progress = progress_ops.default_progress(small_cycling_plan, TODAY)

    for index in range(3):
        progress = progress_ops.mark_list(small_cycling_plan, progress, index, True, TODAY)

    assert progress.list_offsets == (1, 1, 1)
    assert progress.completed == (False, False, False)


def test_transitions_do_not_modify_the_original(small_cycling_plan):
    original = progress_ops.default_progress(small_cycling_plan, TODAY)
    progress_ops.mark_list(small_cycling_plan, original, 0, True, TODAY)

    assert original.list_offsets == (0, 0, 0)
    assert original.completed == (False, False, False)


def test_cycling_date_change_clears_the_checklist(small_cycling_plan):
    progress = progress_ops.default_progress(small_cycling_plan, TODAY)
    progress = progress_ops.mark_list(small_cycling_plan, progress, 0, True, TODAY)

    rolled = progress_ops.roll_over(small_cycling_plan, progress, TOMORROW)

    assert rolled.completed == (False, False, False)
    assert rolled.completed_date == TOMORROW
    assert rolled.list_offsets == (1, 0, 0)


def test_cycling_revert_list(small_cycling_plan):
    progress = progress_ops.default_progress(small_cycling_plan, TODAY)
    progress = progress_ops.mark_list(small_cycling_plan, progress, 1, True, TODAY)

    reverted = progress_ops.revert_list(small_cycling_plan, progress, 1)
    assert reverted.list_offsets == (0, 0, 0)
    assert reverted.completed == (False, False, False)

    # Reverting from the start wraps to the end of the list
    wrapped = progress_ops.revert_list(small_cycling_plan, reverted, 2)
    assert wrapped.list_offsets == (0, 0, 30)


def test_set_list_position(small_cycling_plan):
    progress = progress_ops.default_progress(small_cycling_plan, TODAY)

    # Gospels: Luke is book index 2, after Matthew (28) and Mark (16)
    moved = progress_ops.set_list_position(small_cycling_plan, progress, 0, 2, 5)

    assert moved.list_offsets == (48, 0, 0)


# ---------------------------------------------------------------------------
# Calendar transitions
# ---------------------------------------------------------------------------

def test_calendar_check_advances_and_clears_flag(calendar_plan):
    progress = progress_ops.default_progress(calendar_plan, date(2026, 1, 1))
    progress = replace(progress, completed=(True, False, False, False))

    checked = progress_ops.mark_list(calendar_plan, progress, 0, True, date(2026, 1, 1))

    assert checked.effective_day_indices == (1, 0, 0, 0)
    assert checked.completed == (False, False, False, False)


def test_calendar_uncheck_is_a_no_op(calendar_plan):
    progress = progress_ops.default_progress(calendar_plan, TODAY)

    assert progress_ops.mark_list(calendar_plan, progress, 0, False, TODAY) == progress


def test_calendar_date_change_keeps_the_checklist(calendar_plan):
    progress = progress_ops.default_progress(calendar_plan, TODAY)
    progress = replace(progress, completed=(True, False, True, False))

    rolled = progress_ops.roll_over(calendar_plan, progress, TOMORROW)

    assert rolled.completed == (True, False, True, False)
    assert rolled.completed_date == TOMORROW


def test_calendar_revert_and_set_day(calendar_plan):
    progress = progress_ops.default_progress(calendar_plan, date(2026, 1, 1))

    reverted = progress_ops.revert_list(calendar_plan, progress, 2)
    assert reverted.effective_day_indices == (0, 0, -1, 0)

    moved = progress_ops.set_day_index(reverted, 3, 400)
    assert moved.effective_day_indices == (0, 0, -1, 400)


# ---------------------------------------------------------------------------
# Migration
# ---------------------------------------------------------------------------

def test_migrate_legacy_state():
    legacy = {
        "startDate": "2025-03-01",
        "listOffsets": [1, 2, 3, 4, 5, 6, 7, 8, 9, 10],
        "translation": "ESV",
        "daysToGenerate": 60,
    }

    migrated = migrate_legacy_state(legacy)

    assert migrated == {
        "version": 2,
        "active_plan": "horner",
        "days_to_generate": 60,
        "plans": {
            "horner": {
                "start_date": "2025-03-01",
                "list_offsets": [1, 2, 3, 4, 5, 6, 7, 8, 9, 10],
            },
        },
    }


def test_migrate_current_state_is_unchanged():
    current = {"version": 2, "active_plan": "mcheyne", "plans": {}}
    assert migrate_legacy_state(current) is current


def test_migrate_empty_state():
    assert migrate_legacy_state({}) == {"version": 2, "plans": {}}


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

def test_repository_round_trip(tmp_path, small_cycling_plan):
    path = tmp_path / "state" / "state.json"
    repo = JsonProgressRepository(path, today=TODAY)

    progress = progress_ops.mark_list(
        small_cycling_plan, repo.load(small_cycling_plan), 1, True, TODAY
    )
    repo.save(small_cycling_plan.id, progress)

    reloaded = JsonProgressRepository(path, today=TODAY).load(small_cycling_plan)
    assert reloaded == progress


def test_repository_applies_rollover_on_load(tmp_path, small_cycling_plan, calendar_plan):
    path = tmp_path / "state.json"
    repo = JsonProgressRepository(path, today=TODAY)

    cycling_progress = replace(
        progress_ops.default_progress(small_cycling_plan, TODAY), completed=(True, False, False)
    )
    calendar_progress = replace(
        progress_ops.default_progress(calendar_plan, TODAY), completed=(True, False, False, False)
    )
    repo.save(small_cycling_plan.id, cycling_progress)
    repo.save(calendar_plan.id, calendar_progress)

    next_day = JsonProgressRepository(path, today=TOMORROW)
    assert next_day.load(small_cycling_plan).completed == (False, False, False)
    assert next_day.load(calendar_plan).completed == (True, False, False, False)


def test_repository_missing_file_gives_defaults(tmp_path, small_cycling_plan):
    repo = JsonProgressRepository(tmp_path / "missing.json", today=TODAY)

    assert repo.load(small_cycling_plan) == progress_ops.default_progress(small_cycling_plan, TODAY)
    assert repo.active_plan_id("horner") == "horner"
    assert not (tmp_path / "missing.json").exists()


def test_repository_corrupt_file_gives_defaults(tmp_path, small_cycling_plan, capsys):
    path = tmp_path / "state.json"
    path.write_text("{not json")

    repo = JsonProgressRepository(path, today=TODAY)

    assert repo.load(small_cycling_plan).list_offsets == (0, 0, 0)
    assert "Warning" in capsys.readouterr().out


def test_repository_wrong_shape_file_gives_defaults(tmp_path, small_cycling_plan, capsys):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"version": 2, "plans": [], "days_to_generate": "lots"}))

    repo = JsonProgressRepository(path, today=TODAY)

    assert repo.load(small_cycling_plan) == progress_ops.default_progress(small_cycling_plan, TODAY)
    assert repo.days_to_generate(30) == 30
    assert "not a mapping" in capsys.readouterr().out

    # Saving replaces the bad file with a well-formed one
    repo.save(small_cycling_plan.id, repo.load(small_cycling_plan))
    assert list(json.loads(path.read_text())["plans"]) == ["small"]


def test_repository_ignores_invalid_settings(tmp_path, capsys):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({
        "version": 2, "active_plan": ["horner"], "days_to_generate": "lots", "plans": {},
    }))

    repo = JsonProgressRepository(path, today=TODAY)

    assert repo.active_plan_id("horner") == "horner"
    assert repo.days_to_generate(30) == 30
    assert "days_to_generate" in capsys.readouterr().out


def test_repository_migrates_legacy_file(tmp_path, small_cycling_plan):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"startDate": "2026-10-01", "listOffsets": [5, 160, 2, 9]}))

    # The legacy blob belongs to "horner"; load it through a plan with that id
    plan = replace(small_cycling_plan, id="horner")
    repo = JsonProgressRepository(path, today=TODAY)
    progress = repo.load(plan)

    assert repo.active_plan_id("other") == "horner"
    assert progress.start_date == date(2026, 10, 1)
    # Fitted to three lists; 160 wraps inside the 150-chapter Psalms list
    assert progress.list_offsets == (5, 10, 2)


def test_repository_reset(tmp_path, small_cycling_plan):
    path = tmp_path / "state.json"
    repo = JsonProgressRepository(path, today=TODAY)
    repo.save(small_cycling_plan.id, PlanProgress(
        start_date=date(2026, 1, 1),
        list_offsets=(4, 5, 6),
        completed_date=TODAY,
        completed=(False, True, False),
    ))

    reset = repo.reset(small_cycling_plan)

    assert reset == progress_ops.default_progress(small_cycling_plan, TODAY)
    assert JsonProgressRepository(path, today=TODAY).load(small_cycling_plan) == reset


def test_repository_settings(tmp_path):
    path = tmp_path / "state.json"
    repo = JsonProgressRepository(path, today=TODAY)

    repo.set_active_plan("mcheyne")
    repo.set_days_to_generate(90)

    reloaded = JsonProgressRepository(path, today=TODAY)
    assert reloaded.active_plan_id("horner") == "mcheyne"
    assert reloaded.days_to_generate() == 90


def test_repository_writes_through_a_temp_file(tmp_path, small_cycling_plan):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"version": 2, "active_plan": "small", "plans": {}}))
    repo = JsonProgressRepository(path, today=TODAY)

    repo.save(small_cycling_plan.id, repo.load(small_cycling_plan))

    assert [p.name for p in tmp_path.iterdir()] == ["state.json"]
    stored = json.loads(path.read_text())
    assert stored["active_plan"] == "small"
    assert stored["plans"]["small"]["list_offsets"] == [0, 0, 0]
