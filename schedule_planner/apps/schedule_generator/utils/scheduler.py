'''
Name: apps/schedule_generator/utils/scheduler.py
Description: Entry point for schedule generation. Expands recurring events,
             ranks tasks and places them into free work time.
Authors: Schedule planner maintainers
Created: October 8, 2026
Last Modified: October 19, 2026
'''

import logging
from datetime import datetime, time, timedelta
from typing import List, Dict, Optional, Tuple

from .constants import (
    LOGGER_NAME, RepeatFrequency, WEEKDAYS, get_setting,
    MSG_EVENT_NAME_EMPTY, MSG_EVENT_TIMES, MSG_WEEKLY_DAYS, MSG_BAD_FREQUENCY,
    MSG_TASK_NAME_EMPTY, MSG_TASK_EFFORT, MSG_TASK_PRIORITY, MSG_TASK_COMPLETION,
)
from .errors import ScheduleGenerationError, ComplexityLimitExceededError, PreconditionViolatedError
from .placer import place
from .prioritizer import rank, split_completed, remaining_effort, task_sort_key
from .recurrence import expand
from .timezone import get_local_tz, to_datetime, local_date, parse_time_of_day

logger = logging.getLogger(LOGGER_NAME)

# Data structures used here:
# Snapshot = {"events": [EventDefinition], "tasks": [Task]}
# EventDefinition = {"id","name","start_time","end_time","repeat": {"frequency","days_of_week"}}
# Task = {"id","name","deadline","expected_completion_time","completion_level","priority"[,"created_at"]}


def _require_aware(value, field, owner):
    if not isinstance(value, datetime):
        raise PreconditionViolatedError(f"{owner}: {field} must be a datetime, got {type(value).__name__}.")
    if value.tzinfo is None:
        raise PreconditionViolatedError(f"{owner}: {field} must be timezone-aware.")


def validate_event(event: dict):
    """Raise PreconditionViolatedError if an event definition is malformed."""
    label = f"Event {event.get('id')!r}"
    if not str(event.get("name") or "").strip():
        raise PreconditionViolatedError(MSG_EVENT_NAME_EMPTY)
    _require_aware(event.get("start_time"), "start_time", label)
    _require_aware(event.get("end_time"), "end_time", label)
    if event["start_time"] >= event["end_time"]:
        raise PreconditionViolatedError(MSG_EVENT_TIMES)
    repeat = event.get("repeat") or {}
    frequency = repeat.get("frequency")
    if frequency not in RepeatFrequency.values:
        raise PreconditionViolatedError(MSG_BAD_FREQUENCY.format(frequency=frequency))
    if frequency == RepeatFrequency.WEEKLY:
        days = repeat.get("days_of_week") or []
        if not days or any(d not in WEEKDAYS for d in days):
            raise PreconditionViolatedError(MSG_WEEKLY_DAYS)


def _require_number(value, field, owner):
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PreconditionViolatedError(f"{owner}: {field} must be a number, got {type(value).__name__}.")


def validate_task(task: dict):
    """Raise PreconditionViolatedError if a task is malformed."""
    label = f"Task {task.get('id')!r}"
    if not str(task.get("name") or "").strip():
        raise PreconditionViolatedError(MSG_TASK_NAME_EMPTY)
    _require_aware(task.get("deadline"), "deadline", label)
    for field in ("expected_completion_time", "priority", "completion_level"):
        _require_number(task.get(field, 0), field, label)
    if task.get("expected_completion_time", 0) <= 0:
        raise PreconditionViolatedError(MSG_TASK_EFFORT)
    if not 0 <= task.get("priority", 0) <= 100:
        raise PreconditionViolatedError(MSG_TASK_PRIORITY)
    if not 0 <= task.get("completion_level", 0) <= 100:
        raise PreconditionViolatedError(MSG_TASK_COMPLETION)


def check_complexity(events: List[dict], tasks: List[dict], horizon_days: int):
    """Raise ComplexityLimitExceededError before any expensive work is done."""
    total_minutes = sum(remaining_effort(t).total_seconds() for t in tasks) / 60.0
    limits = (
        ("events", len(events), get_setting("MAX_EVENTS")),
        ("tasks", len(tasks), get_setting("MAX_TASKS")),
        ("total remaining effort (min)", total_minutes, get_setting("MAX_TOTAL_EFFORT_MINUTES")),
        ("horizon days", horizon_days, get_setting("MAX_HORIZON_DAYS")),
    )
    for label, value, limit in limits:
        if value > limit:
            logger.warning("check_complexity: %s=%s exceeds limit %s", label, value, limit)
            raise ComplexityLimitExceededError()


def default_work_window() -> Tuple[time, time]:
    return (parse_time_of_day(get_setting("WORK_DAY_START")), parse_time_of_day(get_setting("WORK_DAY_END")))


def _parse_work_window(work_window) -> Tuple[time, time]:
    if work_window is None:
        return default_work_window()
    if not isinstance(work_window, (list, tuple)) or len(work_window) != 2:
        raise PreconditionViolatedError("Work window must be a (start, end) pair of times.")
    try:
        return (parse_time_of_day(work_window[0]), parse_time_of_day(work_window[1]))
    except (TypeError, ValueError):
        raise PreconditionViolatedError(f"Work window times must look like HH:MM, got {work_window!r}.")


def build_plan(
    snapshot: Dict,
    now: datetime,
    horizon_days: Optional[int] = None,
    work_window: Optional[Tuple] = None,
    tz=None,
) -> List[Dict]:
    """
    Main scheduling routine.
    Inputs:
      - snapshot: {"events": [...], "tasks": [...]} for one schedule
      - now: current instant (tz-aware); tasks are never placed before it
      - horizon_days: horizon length, starting at local midnight of now's day
      - work_window: (start_of_day, end_of_day) as times or "HH:MM" strings
      - tz: local timezone name or tzinfo (default: settings)
    Returns:
      - ordered list of plan items
    Raises ScheduleGenerationError subclasses on any failure.
    """
    events = list(snapshot.get("events") or [])
    tasks = list(snapshot.get("tasks") or [])
    if horizon_days is None:
        horizon_days = get_setting("HORIZON_DAYS")
    try:
        horizon_days = int(horizon_days)
    except (TypeError, ValueError):
        raise PreconditionViolatedError(f"Horizon must be a whole number of days, got {horizon_days!r}.")
    work_window = _parse_work_window(work_window)
    local_tz = get_local_tz(tz)

    _require_aware(now, "now", "generate")
    if horizon_days <= 0:
        raise PreconditionViolatedError("Horizon must span at least one day.")
    if work_window[0] is None or work_window[1] is None or work_window[0] == work_window[1]:
        raise PreconditionViolatedError("Work window must have distinct start and end times.")
    for event in events:
        validate_event(event)
    for task in tasks:
        validate_task(task)
    check_complexity(events, tasks, horizon_days)

    # calendar days, so a DST change inside the horizon still ends at local midnight
    first_day = local_date(now, local_tz)
    horizon_start = to_datetime(first_day, time.min, local_tz)
    horizon_end = to_datetime(first_day + timedelta(days=horizon_days), time.min, local_tz)
    logger.info("build_plan: events=%d tasks=%d horizon=[%s, %s) window=%s-%s tz=%s",
                len(events), len(tasks), horizon_start, horizon_end, work_window[0], work_window[1], local_tz)

    occurrences = expand(events, horizon_start, horizon_end, local_tz)
    ranked = rank(tasks, now)
    _, completed = split_completed(tasks)
    completed.sort(key=task_sort_key)
    return place(
        occurrences, ranked, horizon_start, horizon_end, work_window,
        tzinfo_local=local_tz, not_before=now, completed_tasks=completed,
    )


def generate(snapshot: Dict, now: datetime, horizon_days: Optional[int] = None,
             work_window: Optional[Tuple] = None, tz=None) -> Dict:
    """
    Non-raising wrapper around build_plan.
    Returns {"plan": [...]} on success or {"error": message, "kind": kind}.
    """
    try:
        plan = build_plan(snapshot, now, horizon_days=horizon_days, work_window=work_window, tz=tz)
    except ScheduleGenerationError as exc:
        logger.warning("generate: failed kind=%s message=%s", exc.kind, exc.message)
        return {"error": exc.message, "kind": exc.kind}
    logger.info("generate: done items=%d", len(plan))
    return {"plan": plan}
