'''
Name: icsImportExport.py
Description: Module for exporting generated plans to ICS and importing event
             definitions from ICS calendars.
Authors: Schedule planner maintainers
Created: October 9, 2026
Last Modified: October 12, 2026
Functions: export_plan_ics(plan)
            import_ics(text)
            parse_rrule(value)
'''

import logging

import pytz
from ics import Calendar, Event

from .constants import LOGGER_NAME, RepeatFrequency
from .timezone import get_local_tz

logger = logging.getLogger(LOGGER_NAME)

# RRULE BYDAY codes -> date.weekday()
BYDAY_MAP = {"MO": 0, "TU": 1, "WE": 2, "TH": 3, "FR": 4, "SA": 5, "SU": 6}


def export_plan_ics(plan):
    """
    Exports a generated plan to ICS text.

    Parameters:
        plan (List[Dict]): plan items with scheduled_start_time/scheduled_end_time datetimes.
    Returns:
        Iterator[str]: serialized calendar chunks (serialize_iter in case it gets large)
    """
    calendar = Calendar()
    for index, item in enumerate(plan):
        ics_event = Event()
        ics_event.name = item.get("name") or "No Title"
        ics_event.begin = item["scheduled_start_time"].astimezone(pytz.UTC)
        ics_event.end = item["scheduled_end_time"].astimezone(pytz.UTC)
        ics_event.description = f"{item.get('type')} {item.get('original_id')}"
        # uid must be unique per occurrence, recurring events share original_id
        ics_event.uid = f"{item.get('type')}-{item.get('original_id')}-{index}@schedule-planner"
        calendar.events.add(ics_event)
    logger.info("export_plan_ics: exported %d items", len(plan))
    return calendar.serialize_iter()


def parse_rrule(value):
    """
    Map an RRULE value (e.g. "FREQ=WEEKLY;BYDAY=MO,WE") to a repeat dict.
    Unsupported frequencies fall back to a one-off event.
    """
    if not value:
        return {"frequency": RepeatFrequency.NONE.value, "days_of_week": []}
    parts = dict(p.split("=", 1) for p in value.strip().split(";") if "=" in p)
    frequency = parts.get("FREQ", "").upper()
    if frequency not in RepeatFrequency.values:
        logger.warning("parse_rrule: unsupported FREQ %r, importing as one-off", frequency)
        frequency = RepeatFrequency.NONE.value
    days = []
    if frequency == RepeatFrequency.WEEKLY:
        # strip ordinal prefixes such as "1MO"
        days = sorted({BYDAY_MAP[d[-2:]] for d in parts.get("BYDAY", "").split(",") if d[-2:] in BYDAY_MAP})
    return {"frequency": frequency, "days_of_week": days}


def import_ics(text):
    """
    Reads event definitions from ICS text.
    Returns:
        List[Dict]: {"name","start_time","end_time","repeat"} ready for Schedule.add_event
    """
    events = []
    calendar = Calendar(text)
    for ics_event in calendar.events:
        start = ics_event.begin.datetime.astimezone(pytz.UTC)
        end = ics_event.end.datetime.astimezone(pytz.UTC)
        repeat = parse_rrule(next((e.value for e in ics_event.extra if e.name == "RRULE"), None))
        if repeat["frequency"] == RepeatFrequency.WEEKLY and not repeat["days_of_week"]:
            # weekly without BYDAY repeats on the start's local weekday
            repeat["days_of_week"] = [start.astimezone(get_local_tz()).weekday()]
        events.append({
            "name": ics_event.name or "No Title",
            "start_time": start,
            "end_time": end,
            "repeat": repeat,
        })
    events.sort(key=lambda e: (e["start_time"], e["name"]))
    logger.info("import_ics: imported %d events", len(events))
    return events
