'''
Name: apps/schedule_generator/views.py
Description: JSON passthrough views for the ScheduleGenerator concept and
                the .ics export of a generated plan.
Authors: Schedule planner maintainers
Created: October 6, 2026
Last Modified: October 19, 2026
'''
import json
import logging

from django.core.exceptions import ValidationError, ObjectDoesNotExist
from django.db import transaction
from django.http import JsonResponse, StreamingHttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .models import Schedule, Event, Task, GeneratedSchedule
from .passthrough import is_passthrough
from .utils.constants import LOGGER_NAME
from .utils.icsImportExport import export_plan_ics, import_ics

logger = logging.getLogger(LOGGER_NAME)

CONCEPT = "ScheduleGenerator"


# ============================================================
#  SERIALIZERS
# ============================================================

def _plan_item_json(item):
    return {
        "type": item["type"],
        "name": item["name"],
        "originalId": item["original_id"],
        "scheduledStartTime": item["scheduled_start_time"].isoformat(),
        "scheduledEndTime": item["scheduled_end_time"].isoformat(),
    }


def _event_json(event):
    return {
        "_id": event.pk,
        "name": event.name,
        "schedulePointer": event.schedule_id,
        "startTime": event.start_time.isoformat(),
        "endTime": event.end_time.isoformat(),
        "repeat": {"frequency": event.repeat_frequency, "daysOfWeek": list(event.days_of_week or [])},
    }


def _task_json(task):
    return {
        "_id": task.pk,
        "name": task.name,
        "schedulePointer": task.schedule_id,
        "deadline": task.deadline.isoformat(),
        "expectedCompletionTime": task.expected_completion_time,
        "completionLevel": task.completion_level,
        "priority": task.priority,
    }


def _schedule_json(schedule):
    details = schedule.details()
    return {
        "_id": details["id"],
        "owner": details["owner"],
        "timestamp": details["timestamp"],
        "events": details["events"],
        "tasks": details["tasks"],
    }


def _generated_json(generated):
    return {
        "_id": generated.pk,
        "owner": generated.owner,
        "schedulePointer": generated.schedule_id,
        "timestamp": generated.timestamp,
        "events": list(generated.events),
        "tasks": list(generated.tasks),
        "generatedPlan": [_plan_item_json(item) for item in generated.plan_items()],
    }


def _int(payload
, key, default=None):
    value = payload.get(key, default)
    if value is None:
        raise ValidationError(f"Missing field '{key}'.")
    return int(value)


# ============================================================
#  ACTIONS & QUERIES
# ============================================================

def initialize_schedule(payload):
    schedule = Schedule.objects.initialize(payload.get("owner"))
    return {"schedule": schedule.pk}


def add_event(payload):
    schedule = Schedule.objects.get_by_id(payload.get("schedule"))
    event = schedule.add_event(payload.get("name"), payload.get("startTime"), payload.get("endTime"),
                               payload.get("repeat"))
    return {"event": event.pk}


def edit_event(payload):
    schedule = Schedule.objects.get_by_id(payload.get("schedule"))
    schedule.edit_event(payload.get("oldEvent"), payload.get("name"), payload.get("startTime"),
                        payload.get("endTime"), payload.get("repeat"))
    return {}


def delete_event(payload):
    schedule = Schedule.objects.get_by_id(payload.get("schedule"))
    schedule.delete_event(payload.get("event"))
    return {}


def import_events(payload):
    '''
    Add every VEVENT of an uploaded .ics calendar to the schedule.
    All or nothing: one invalid event rejects the whole import.
    '''
    schedule = Schedule.objects.get_by_id(payload.get("schedule"))
    try:
        definitions = import_ics(payload.get("ics") or "")
    except Exception:
        logger.exception("import_events: ICS parse failed for schedule=%s", schedule.pk)
        raise ValidationError("Could not read the uploaded .ics calendar.")
    with transaction.atomic():
        created = [schedule.add_event(**d).pk for d in definitions]
    return {"events": created}


def add_task(payload):
    schedule = Schedule.objects.get_by_id(payload.get("schedule"))
    task = schedule.add_task(
        payload.get("name"),
        payload.get("deadline"),
        _int(payload, "expectedCompletionTime"),
        _int(payload, "priority"),
        completion_level=_int(payload, "completionLevel", 0),
    )
    return {"task": task.pk}


def edit_task(payload):
    schedule = Schedule.objects.get_by_id(payload.get("schedule"))
    schedule.edit_task(
        payload.get("oldTask"),
        payload.get("name"),
        payload.get("deadline"),
        _int(payload, "expectedCompletionTime"),
        _int(payload, "completionLevel"),
        _int(payload, "priority"),
    )
    return {}


def delete_task(payload):
    schedule = Schedule.objects.get_by_id(payload.get("schedule"))
    schedule.delete_task(payload.get("task"))
    return {}


def generate_schedule(payload):
    schedule = Schedule.objects.get_by_id(payload.get("schedule"))
    result = schedule.generate(
        now=payload.get("now"),
        horizon_days=payload.get("horizonDays"),
        work_window=payload.get("workWindow"),
    )
    if "error" in result:
        return result
    return {
        "newSchedule": result["generated_schedule_id"],
        "scheduleId": result["schedule_id"],
        "timestamp": result["timestamp"],
        "generatedPlan": [_plan_item_json(item) for item in result["generated_plan"]],
    }


def get_generated_schedule(payload):
    '''
    Stored plan of a schedule: the one at `timestamp`, or the latest.
    '''
    schedule = Schedule.objects.get_by_id(payload.get("schedule"))
    timestamp = payload.get("timestamp")
    generated = GeneratedSchedule.objects.get_for(schedule, None if timestamp is None else int(timestamp))
    return {"generatedSchedule": [_generated_json(generated)]}


def get_schedule_by_owner(payload):
    return {"schedule": Schedule.objects.get_by_owner(payload.get("owner")).pk}


def get_schedule_details(payload):
    return {"scheduleDetails": [_schedule_json(Schedule.objects.get_by_id(payload.get("schedule")))]}


def get_events_for_schedule(payload):
    schedule = Schedule.objects.get_by_id(payload.get("schedule"))
    return {"event": list(Event.objects.for_schedule(schedule).values_list("id", flat=True))}


def get_tasks_for_schedule(payload):
    schedule = Schedule.objects.get_by_id(payload.get("schedule"))
    return {"task": list(Task.objects.for_schedule(schedule).values_list("id", flat=True))}


def get_event_details(payload):
    try:
        event = Event.objects.get(pk=payload.get("event"))
    except (Event.DoesNotExist, ValueError, TypeError):
        raise Event.DoesNotExist(f"Event with ID {payload.get('event')} not found.")
    return {"eventDetails": [_event_json(event)]}


def get_task_details(payload):
    try:
        task = Task.objects.get(pk=payload.get("task"))
    except (Task.DoesNotExist, ValueError, TypeError):
        raise Task.DoesNotExist(f"Task with ID {payload.get('task')} not found.")
    return {"taskDetails": [_task_json(task)]}


ACTIONS = {
    "initializeSchedule": initialize_schedule,
    "addEvent": add_event,
    "editEvent": edit_event,
    "deleteEvent": delete_event,
    "importEvents": import_events,
    "addTask": add_task,
    "editTask": edit_task,
    "deleteTask": delete_task,
    "generateSchedule": generate_schedule,
    "_getScheduleByOwner": get_schedule_by_owner,
    "_getScheduleDetails": get_schedule_details,
    "_getEventsForSchedule": get_events_for_schedule,
    "_getTasksForSchedule": get_tasks_for_schedule,
    "_getEventDetails": get_event_details,
    "_getTaskDetails": get_task_details,
    "_getGeneratedSchedule": get_generated_schedule,
}


def dispatch(action, payload):
    '''
    Run one concept action or query.
    Returns (status, body). Expected failures become {"error": message}.
    '''
    handler = ACTIONS.get(action)
    if handler is None:
        return 404, {"error": f"Unknown action '{action}'."}
    try:
        body = handler(payload)
    except ValidationError as e:
        message = " ".join(e.messages)
        logger.warning("dispatch: %s rejected: %s", action, message)
        return 400, {"error": message}
    except ObjectDoesNotExist as e:
        logger.warning("dispatch: %s not found: %s", action, e)
        return 404, {"error": str(e)}
    except (ValueError, TypeError) as e:
        logger.warning("dispatch: %s bad input: %s", action, e)
        return 400, {"error": f"Invalid input: {e}"}
    if "error" in body:
        return 409, body
    return 200, body


# ============================================================
#  VIEWS
# ============================================================

@csrf_exempt
@require_POST
def concept_action(request, action):
    '''
    POST /api/ScheduleGenerator/<action> with a JSON object body.
    '''
    route = f"/api/{CONCEPT}/{action}"
    if not is_passthrough(route):
        logger.warning("concept_action: route %s is not a passthrough route", route)
        return JsonResponse({"error": f"Route {route} is not available."}, status=404)

    try:
        payload = json.loads(request.body or b"{}")
    except json.JSONDecodeError:
        return JsonResponse({"error": "Request body must be JSON."}, status=400)
    if not isinstance(payload, dict):
        return JsonResponse({"error": "Request body must be a JSON object."}, status=400)

    logger.info("concept_action: %s keys=%s", action, sorted(payload))
    status, body = dispatch(action, payload)
    return JsonResponse(body, status=status)


@require_GET
def export_schedule(request):
    '''
    GET /api/ScheduleGenerator/exportSchedule?schedule=<id>[&timestamp=<n>]
    Streams a stored plan (the latest unless a timestamp is given) as an .ics file.
    Reading never regenerates, so the schedule's timestamp is unchanged.
    '''
    timestamp = request.GET.get("timestamp")
    try:
        schedule = Schedule.objects.get_by_id(request.GET.get("schedule"))
        generated = GeneratedSchedule.objects.get_for(schedule, int(timestamp) if timestamp else None)
    except ObjectDoesNotExist as e:
        return JsonResponse({"error": str(e)}, status=404)
    except ValueError as e:
        return JsonResponse({"error": f"Invalid input: {e}"}, status=400)

    plan = generated.plan_items()
    resp = StreamingHttpResponse(export_plan_ics(plan), content_type="text/calendar")
    resp["Content-Disposition"] = 'attachment; filename="GeneratedSchedule.ics"'
    logger.info("export_schedule: schedule=%s timestamp=%s items=%d", schedule.pk, generated.timestamp, len(plan))
    return resp
