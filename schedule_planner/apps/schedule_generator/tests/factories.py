from datetime import datetime, timedelta

import pytz

ET = pytz.timezone("America/New_York")

# Monday, well clear of DST changes
BASE_DAY = datetime(2025, 10, 6)


def at(day_offset, hour, minute=0):
    """UTC instant for BASE_DAY + day_offset at hour:minute Eastern time."""
    local = ET.localize(BASE_DAY + timedelta(days=day_offset, hours=hour, minutes=minute))
    return local.astimezone(pytz.UTC)


def make_event(event_id, name, start, end, frequency="NONE", days_of_week=None):
    return {
        "id": event_id,
        "name": name,
        "start_time": start,
        "end_time": end,
        "repeat": {"frequency": frequency, "days_of_week": days_of_week or []},
    }


def make_task(task_id, name, deadline, minutes, priority=50, completion=0):
    return {
        "id": task_id,
        "name": name,
        "deadline": deadline,
        "expected_completion_time": minutes,
        "completion_level": completion,
        "priority": priority,
    }
