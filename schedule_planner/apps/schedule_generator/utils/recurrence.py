'''
Name: apps/schedule_generator/utils/recurrence.py
Description: Expands recurring event definitions into concrete occurrences
             inside a planning horizon.
Authors: Schedule planner maintainers
Created: October 7, 2026
Last Modified: October 12, 2026
'''

import calendar
import logging
from datetime import datetime, date
from typing import List, Dict

from .constants import LOGGER_NAME, RepeatFrequency
from .timezone import to_datetime, local_date, local_time, iter_local_dates

logger = logging.getLogger(LOGGER_NAME)

# Data structures used here:
# EventDefinition = {"id","name","start_time","end_time","repeat": {"frequency","days_of_week"}}
# Occurrence = {"name","start","end","event_id"}


def _clamped_day(year: int, month: int, day: int) -> int:
    """Anchor day-of-month clamped to the last day of (year, month)."""
    return min(day, calendar.monthrange(year, month)[1])


def _repeats_on_daily(event, d: date, anchor: date) -> bool:
    return True


def _repeats_on_weekly(event, d: date, anchor: date) -> bool:
    return d.weekday() in set(event["repeat"].get("days_of_week") or [])


def _repeats_on_monthly(event, d: date, anchor: date) -> bool:
    return d.day == _clamped_day(d.year, d.month, anchor.day)


def _repeats_on_yearly(event, d: date, anchor: date) -> bool:
    return d.month == anchor.month and d.day == _clamped_day(d.year, d.month, anchor.day)


REPEAT_RULES = {
    RepeatFrequency.DAILY: _repeats_on_daily,
    RepeatFrequency.WEEKLY: _repeats_on_weekly,
    RepeatFrequency.MONTHLY: _repeats_on_monthly,
    RepeatFrequency.YEARLY: _repeats_on_yearly,
}


def _occurrence(event, start: datetime, end: datetime) -> Dict:
    return {
        "name": event["name"],
        "start": start,
        "end": end,
        "event_id": event["id"],
    }


def expand_event(event: dict, horizon_start: datetime, horizon_end: datetime, tzinfo_local=None) -> List[Dict]:
    """
    Occurrences of a single event definition that start inside
    [horizon_start, horizon_end). Each occurrence keeps the anchor's full
    duration; occurrences starting before horizon_start are dropped.
    """
    frequency = event["repeat"]["frequency"]
    start_time = event["start_time"]
    duration = event["end_time"] - start_time

    if frequency == RepeatFrequency.NONE:
        if horizon_start <= start_time < horizon_end:
            return [_occurrence(event, start_time, event["end_time"])]
        return []

    rule = REPEAT_RULES[frequency]
    anchor = local_date(start_time, tzinfo_local)
    anchor_tod = local_time(start_time, tzinfo_local)

    results = []
    for d in iter_local_dates(horizon_start, horizon_end, tzinfo_local):
        if d < anchor or not rule(event, d, anchor):
            continue
        occ_start = to_datetime(d, anchor_tod, tzinfo_local)
        if occ_start < horizon_start or occ_start >= horizon_end:
            continue
        results.append(_occurrence(event, occ_start, occ_start + duration))
    return results


def expand(events: List[dict], horizon_start: datetime, horizon_end: datetime, tzinfo_local=None) -> List[Dict]:
    """Expand every event definition; result is sorted by (start, event_id)."""
    logger.debug("expand: events_in=%d horizon=[%s, %s)", len(events), horizon_start, horizon_end)
    occurrences = []
    for event in events:
        occurrences.extend(expand_event(event, horizon_start, horizon_end, tzinfo_local))
    occurrences.sort(key=lambda o: (o["start"], str(o["event_id"])))
    logger.debug("expand: occurrences_out=%d", len(occurrences))
    return occurrences
