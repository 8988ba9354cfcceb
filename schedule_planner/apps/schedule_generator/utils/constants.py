'''
Name: apps/schedule_generator/utils/constants.py
Description: Constants used in the schedule generator app.
                Repeat frequencies
                Plan item types
                Error messages
                Scheduling defaults (overridable from settings)
                Debug logger
Authors: Schedule planner maintainers
Created: October 6, 2026
Last Modified: October 19, 2026
'''

from django.conf import settings
from django.db import models


class RepeatFrequency(models.TextChoices):
    NONE = "NONE", "None"
    DAILY = "DAILY", "Daily"
    WEEKLY = "WEEKLY", "Weekly"
    MONTHLY = "MONTHLY", "Monthly"
    YEARLY = "YEARLY", "Yearly"


PLAN_ITEM_EVENT = "event"
PLAN_ITEM_TASK = "task"
COMPLETED_SUFFIX = " (Completed)"

# 0=Monday ... 6=Sunday, same as date.weekday()
WEEKDAYS = range(7)

LOGGER_NAME = "apps.schedule_generator"

# Error kinds surfaced to callers
KIND_INFEASIBLE = "InfeasibleSchedule"
KIND_COMPLEXITY = "ComplexityLimitExceeded"
KIND_PRECONDITION = "PreconditionViolated"

MSG_INFEASIBLE = "Not all tasks could be scheduled within the planning horizon or available time slots."
MSG_COMPLEXITY = "Scheduling complexity too high; a feasible schedule cannot be generated with current configuration."

MSG_EVENT_NAME_EMPTY = "Event name cannot be empty."
MSG_EVENT_TIMES = "Event start time must be before end time."
MSG_WEEKLY_DAYS = "Weekly repeat events must specify at least one day of the week (0=Monday, 6=Sunday)."
MSG_BAD_FREQUENCY = "Unknown repeat frequency {frequency!r}."
MSG_TASK_NAME_EMPTY = "Task name cannot be empty."
MSG_TASK_EFFORT = "Expected completion time must be positive."
MSG_TASK_PRIORITY = "Priority must be between 0 and 100."
MSG_TASK_COMPLETION = "Completion level must be between 0 and 100."
MSG_SCHEDULE_NOT_FOUND = "Schedule with ID {schedule} not found."
MSG_OWNER_NOT_FOUND = "No schedule found for owner {owner}."
MSG_EVENT_NOT_FOUND = "Event with ID {event} not found or not associated with schedule {schedule}."
MSG_TASK_NOT_FOUND = "Task with ID {task} not found or not associated with schedule {schedule}."
MSG_PLAN_NOT_FOUND = "No generated schedule found for schedule {schedule}{at}."

DEFAULTS = {
    "HORIZON_DAYS": 7,
    "WORK_DAY_START": "08:00",
    "WORK_DAY_END": "22:00",
    "TIME_ZONE": "America/New_York",
    "MAX_EVENTS": 100,
    "MAX_TASKS": 100,
    "MAX_TOTAL_EFFORT_MINUTES": 7 * 24 * 60,
    "MAX_HORIZON_DAYS": 366,
}


def get_setting(name):
    '''
    Look up a scheduling setting. Values in settings.SCHEDULE_GENERATOR win
    over DEFAULTS.
    '''
    overrides = getattr(settings, "SCHEDULE_GENERATOR", None) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
