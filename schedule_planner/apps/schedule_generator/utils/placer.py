'''
Name: apps/schedule_generator/utils/placer.py
Description: Greedy placement of ranked tasks into the free time left over by
             event occurrences, inside each day's work window.
Authors: Schedule planner maintainers
Created: October 8, 2026
Last Modified: October 12, 2026
'''

import logging
from datetime import datetime, time, timedelta
from typing import List, Tuple, Dict, Optional, Iterable

from .constants import (
    LOGGER_NAME, PLAN_ITEM_EVENT, PLAN_ITEM_TASK, COMPLETED_SUFFIX,
)
from .errors import InfeasibleScheduleError
from .prioritizer import remaining_effort
from .timezone import to_datetime, iter_local_dates

logger = logging.getLogger(LOGGER_NAME)

# BusySlot = (start_datetime, end_datetime), all tz-aware
# WorkWindow = (start_of_day: time, end_of_day: time); end <= start crosses midnight
# PlanItem = {"type","name","original_id","scheduled_start_time","scheduled_end_time"}

Slot = Tuple[datetime, datetime]


def merge_busy_slots(busy: Iterable[Slot]) -> List[Slot]:
    """Merge overlapping/touching busy intervals. Returns a new sorted list."""
    busy_sorted = sorted(busy, key=lambda x: (x[0], x[1]))
    if not busy_sorted:
        return []
    merged = []
    cur_s, cur_e = busy_sorted[0]
    for s, e in busy_sorted[1:]:
        if s <= cur_e:
            cur_e = max(cur_e, e)
        else:
            merged.append((cur_s, cur_e))
            cur_s, cur_e = s, e
    merged.append((cur_s, cur_e))
    return merged


def invert_slots(busy: List[Slot], window_start: datetime, window_end: datetime) -> List[Slot]:
    """Return free slots inside [window_start, window_end) given merged busy intervals."""
    free = []
    cur = window_start
    for s, e in busy:
        if e <= window_start or s >= window_end:
            continue
        s_clamped = max(s, window_start)
        e_clamped = min(e, window_end)
        if s_clamped > cur:
            free.append((cur, s_clamped))
        cur = max(cur, e_clamped)
    if cur < window_end:
        free.append((cur, window_end))
    return free


def reserve(busy: List[Slot], slot: Slot) -> List[Slot]:
    """New busy list with slot added; the input list is left untouched."""
    return merge_busy_slots(list(busy) + [slot])


def work_window_segments(horizon_start: datetime, horizon_end: datetime, work_window: Tuple[time, time],
                         tzinfo_local=None, not_before: Optional[datetime] = None) -> List[Slot]:
    """
    Each local day's [start_of_day, end_of_day) clipped to the horizon and to
    not_before, in chronological order. Empty segments are left out.
    """
    day_start_tod, day_end_tod = work_window
    lower = max(horizon_start, not_before) if not_before else horizon_start

    segments = []
    # start one day early so a window crossing midnight into the horizon is kept
    for d in iter_local_dates(horizon_start - timedelta(days=1), horizon_end, tzinfo_local):
        seg_s = to_datetime(d, day_start_tod, tzinfo_local)
        seg_e = to_datetime(d, day_end_tod, tzinfo_local)
        if day_end_tod <= day_start_tod:
            seg_e = to_datetime(d + timedelta(days=1), day_end_tod, tzinfo_local)
        seg_s = max(seg_s, lower)
        seg_e = min(seg_e, horizon_end)
        if seg_s < seg_e:
            segments.append((seg_s, seg_e))
    logger.debug("work_window_segments: window=%s-%s segments=%d", day_start_tod, day_end_tod, len(segments))
    return segments


def find_slot(busy: List[Slot], segments: List[Slot], needed: timedelta, deadline: datetime) -> Optional[Slot]:
    """
    Earliest [start, start + needed) inside a free span of some segment that
    ends at or before deadline. None if there is no such span.
    """
    for seg_s, seg_e in segments:
        if seg_s + needed > deadline:
            # segments are chronological, nothing later can meet the deadline
            return None
        for free_s, free_e in invert_slots(busy, seg_s, seg_e):
            if free_e <= free_s:
                continue
            end = free_s + needed
            if end > deadline:
                return None
            if end <= free_e:
                return (free_s, end)
    return None


def event_item(occurrence: dict) -> Dict:
    return {
        "type": PLAN_ITEM_EVENT,
        "name": occurrence["name"],
        "original_id": occurrence["event_id"],
        "scheduled_start_time": occurrence["start"],
        "scheduled_end_time": occurrence["end"],
    }


def task_item(task: dict, start: datetime, end: datetime) -> Dict:
    return {
        "type": PLAN_ITEM_TASK,
        "name": task["name"],
        "original_id": task["id"],
        "scheduled_start_time": start,
        "scheduled_end_time": end,
    }


def completed_marker(task: dict, at: datetime) -> Dict:
    """Zero-duration item for a task whose remaining effort is already zero."""
    item = task_item(task, at, at)
    item["name"] = f"{task['name']}{COMPLETED_SUFFIX}"
    return item


def plan_sort_key(item: dict) -> Tuple:
    return (
        item["scheduled_start_time"],
        0 if item["type"] == PLAN_ITEM_EVENT else 1,
        str(item["original_id"]),
    )


def place(
    occurrences: List[dict],
    ranked_tasks: List[dict],
    horizon_start: datetime,
    horizon_end: datetime,
    work_window: Tuple[time, time],
    tzinfo_local=None,
    not_before: Optional[datetime] = None,
    completed_tasks: Optional[List[dict]] = None,
) -> List[Dict]:
    """
    Place every ranked task, in order, at the earliest free span of its
    remaining effort that finishes by min(deadline, horizon_end).

    Returns the full plan: occurrences and placed tasks in chronological
    order, followed by zero-duration markers for completed_tasks.
    Raises InfeasibleScheduleError if any task cannot be placed; no partial
    plan is returned in that case.
    """
    logger.info("place: occurrences=%d tasks=%d horizon=[%s, %s)",
                len(occurrences), len(ranked_tasks), horizon_start, horizon_end)

    busy = merge_busy_slots((o["start"], o["end"]) for o in occurrences)
    segments = work_window_segments(horizon_start, horizon_end, work_window, tzinfo_local, not_before)

    placed = []
    for task in ranked_tasks:
        needed = remaining_effort(task)
        deadline = min(task["deadline"], horizon_end)
        slot = find_slot(busy, segments, needed, deadline)
        if slot is None:
            logger.warning("place: UNSCHEDULED task id=%r name=%r needed=%s deadline=%s",
                           task.get("id"), task.get("name"), needed, deadline)
            raise InfeasibleScheduleError(task=task)
        busy = reserve(busy, slot)
        placed.append(task_item(task, *slot))
        logger.info("place: scheduled task name=%r start=%s end=%s", task.get("name"), slot[0], slot[1])

    plan = sorted([event_item(o) for o in occurrences] + placed, key=plan_sort_key)

    marker_at = max(horizon_start, not_before) if not_before else horizon_start
    plan.extend(completed_marker(task, marker_at) for task in (completed_tasks or []))
    return plan
