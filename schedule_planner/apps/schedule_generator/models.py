"""
Models for schedule configurations, the events and tasks they own and the
plans generated from them, along with instance methods for the schedule actions

Authors: Schedule planner maintainers
Created: October 6, 2026
Last Modified: October 19, 2026

A Schedule is one owner's configuration. Generating a schedule reads the
current events and tasks, runs the scheduling core, bumps `timestamp` and
stores the result as a GeneratedSchedule tagged with the new timestamp.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import F
from django.utils import timezone

from .utils.constants import (
    LOGGER_NAME, RepeatFrequency,
    MSG_SCHEDULE_NOT_FOUND, MSG_OWNER_NOT_FOUND, MSG_EVENT_NOT_FOUND, MSG_TASK_NOT_FOUND, MSG_PLAN_NOT_FOUND,
)
from .utils.errors import PreconditionViolatedError
from .utils.scheduler import generate as generate_plan, validate_event, validate_task
from .utils.timezone import to_utc

logger = logging.getLogger(LOGGER_NAME)


def _normalize_repeat(repeat):
    """Accept None, a frequency string or {"frequency", "days_of_week"}."""
    if not repeat:
        return RepeatFrequency.NONE.value, []
    if isinstance(repeat, str):
        return repeat.upper(), []
    frequency = str(repeat.get("frequency") or RepeatFrequency.NONE).upper()
    days = repeat.get("days_of_week") or repeat.get("daysOfWeek") or []
    return frequency, sorted({int(d) for d in days})


def _stored_item(item):
    return dict(
        item,
        scheduled_start_time=item["scheduled_start_time"].isoformat(),
        scheduled_end_time=item["scheduled_end_time"].isoformat(),
    )


# -----------------------------------
# QuerySets & Managers
# -----------------------------------
class ScheduleQuerySet(models.QuerySet):
    def for_owner(self, owner):
        return self.filter(owner=owner)


class ScheduleManager(models.Manager):
    def get_queryset(self):
        return ScheduleQuerySet(self.model, using=self._db)

    def for_owner(self, owner):
        return self.get_queryset().for_owner(owner)

    def initialize(self, owner):
        '''
        Return the owner's schedule configuration, creating an empty one
        (timestamp 0) the first time.
        '''
        if not str(owner or "").strip():
            raise ValidationError("Owner cannot be empty.")
        schedule, created = self.get_or_create(owner=owner)
        logger.info("initialize: owner=%r schedule=%s created=%s", owner, schedule.pk, created)
        return schedule

    def get_by_id(self, schedule_id):
        try:
            return self.get(pk=schedule_id)
        except (self.model.DoesNotExist, ValueError, TypeError):
            raise self.model.DoesNotExist(MSG_SCHEDULE_NOT_FOUND.format(schedule=schedule_id))

    def get_by_owner(self, owner):
        schedule = self.for_owner(owner).first()
        if schedule is None:
            raise self.model.DoesNotExist(MSG_OWNER_NOT_FOUND.format(owner=owner))
        return schedule


class EventQuerySet(models.QuerySet):
    def for_schedule(self, schedule):
        return self.filter(schedule=schedule)


class TaskQuerySet(models.QuerySet):
    def for_schedule(self, schedule):
        return self.filter(schedule=schedule)


class GeneratedScheduleManager(models.Manager):
    def get_for(self, schedule, timestamp=None):
        '''
        The plan stored for `schedule` at `timestamp`, or the latest one
        when no timestamp is given.
        '''
        plans = self.filter(schedule=schedule)
        plan = plans.order_by("-timestamp").first() if timestamp is None else plans.filter(timestamp=timestamp).first()
        if plan is None:
            at = "" if timestamp is None else f" at timestamp {timestamp}"
            raise self.model.DoesNotExist(MSG_PLAN_NOT_FOUND.format(schedule=schedule.pk, at=at))
        return plan


# -----------------------------------
# Models
# -----------------------------------
class Schedule(models.Model):
    '''
    A user's schedule configuration
    One configuration per owner; owners are identifiers from the auth service
    '''
    owner = models.CharField(max_length=255, unique=True)
    timestamp = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ScheduleManager()

    class Meta:
        db_table = "schedule"
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"Schedule {self.pk} (Owner: {self.owner})"

    # -----------------------------------
    # Event actions
    # -----------------------------------
    def add_event(self, name, start_time, end_time, repeat=None):
        '''
        Create an event belonging to this schedule
        '''
        frequency, days = _normalize_repeat(repeat)
        event = Event(
            schedule=self,
            name=name,
            start_time=to_utc(start_time),
            end_time=to_utc(end_time),
            repeat_frequency=frequency,
            days_of_week=days,
        )
        event.save()
        logger.info("add_event: schedule=%s event=%s name=%r repeat=%s", self.pk, event.pk, name, frequency)
        return event

    def _get_event(self, event_id):
        try:
            return self.events.get(pk=event_id)
        except (Event.DoesNotExist, ValueError, TypeError):
            raise Event.DoesNotExist(MSG_EVENT_NOT_FOUND.format(event=event_id, schedule=self.pk))

    def edit_event(self, event_id, name, start_time, end_time, repeat=None):
        '''
        Replace the attributes of one of this schedule's events
        '''
        event = self._get_event(event_id)
        event.name = name
        event.start_time = to_utc(start_time)
        event.end_time = to_utc(end_time)
        event.repeat_frequency, event.days_of_week = _normalize_repeat(repeat)
        event.save()
        logger.info("edit_event: schedule=%s event=%s", self.pk, event.pk)
        return event

    def delete_event(self, event_id):
        self._get_event(event_id).delete()
        logger.info("delete_event: schedule=%s event=%s", self.pk, event_id)

    # -----------------------------------
    # Task actions
    # -----------------------------------
    def add_task(self, name, deadline, expected_completion_time, priority, completion_level=0):
        '''
        Create a task belonging to this schedule (0% complete unless given)
        '''
        task = Task(
            schedule=self,
            name=name,
            deadline=to_utc(deadline),
            expected_completion_time=expected_completion_time,
            completion_level=completion_level,
            priority=priority,
        )
        task.save()
        logger.info("add_task: schedule=%s task=%s name=%r", self.pk, task.pk, name)
        return task

    def _get_task(self, task_id):
        try:
            return self.tasks.get(pk=task_id)
        except (Task.DoesNotExist, ValueError, TypeError):
            raise Task.DoesNotExist(MSG_TASK_NOT_FOUND.format(task=task_id, schedule=self.pk))

    def edit_task(self, task_id, name, deadline, expected_completion_time, completion_level, priority):
        task = self._get_task(task_id)
        task.name = name
        task.deadline = to_utc(deadline)
        task.expected_completion_time = expected_completion_time
        task.completion_level = completion_level
        task.priority = priority
        task.save()
        logger.info("edit_task: schedule=%s task=%s completion=%s", self.pk, task.pk, completion_level)
        return task

    def delete_task(self, task_id):
        self._get_task(task_id).delete()
        logger.info("delete_task: schedule=%s task=%s", self.pk, task_id)

    # -----------------------------------
    # Generation
    # -----------------------------------
    def snapshot(self):
        '''
        Current events and tasks as plain records for the scheduling core
        '''
        return {
            "events": [e.to_record() for e in Event.objects.for_schedule(self).order_by("id")],
            "tasks": [t.to_record() for t in Task.objects.for_schedule(self).order_by("id")],
        }

    def generate(self, now=None, horizon_days=None, work_window=None):
        '''
        Run the scheduler over the current snapshot.
        On success bump timestamp, store the plan as a GeneratedSchedule and return
        {"schedule_id", "generated_schedule_id", "timestamp", "generated_plan"};
        otherwise {"error", "kind"} and nothing is stored.
        '''
        now = to_utc(now) if now else timezone.now()
        with transaction.atomic():
            snapshot = self.snapshot()
            result = generate_plan(snapshot, now, horizon_days=horizon_days, work_window=work_window)
            if "error" in result:
                return result
            Schedule.objects.filter(pk=self.pk).update(timestamp=F("timestamp") + 1)
            self.refresh_from_db(fields=["timestamp"])
            generated = GeneratedSchedule.objects.create(
                schedule=self,
                owner=self.owner,
                timestamp=self.timestamp,
                events=[e["id"] for e in snapshot["events"]],
                tasks=[t["id"] for t in snapshot["tasks"]],
                plan=[_stored_item(item) for item in result["plan"]],
            )
        logger.info("generate: schedule=%s timestamp=%s generated=%s items=%d",
                    self.pk, self.timestamp, generated.pk, len(result["plan"]))
        return {
            "schedule_id": self.pk,
            "generated_schedule_id": generated.pk,
            "timestamp": self.timestamp,
            "generated_plan": result["plan"],
        }

    def details(self):
        return {
            "id": self.pk,
            "owner": self.owner,
            "timestamp": self.timestamp,
            "events": list(self.events.values_list("id", flat=True)),
            "tasks": list(self.tasks.values_list("id", flat=True)),
        }


class Event(models.Model):
    '''
    Fixed (possibly repeating) calendar event of a schedule
    start_time/end_time are the first occurrence; repeats reuse its local
    time of day and duration
    '''
    schedule = models.ForeignKey(Schedule, on_delete=models.CASCADE, related_name="events")
    name = models.CharField(max_length=200)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    repeat_frequency = models.CharField(max_length=10, choices=RepeatFrequency.choices, default=RepeatFrequency.NONE)
    days_of_week = models.JSONField(default=list, blank=True)  # 0=Monday ... 6=Sunday

    objects = EventQuerySet.as_manager()

    class Meta:
        db_table = "schedule_event"
        ordering = ["start_time", "id"]

    def __str__(self):
        return self.name

    def to_record(self):
        return {
            "id": self.pk,
            "name": self.name,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "repeat": {
                "frequency": self.repeat_frequency,
                "days_of_week": list(self.days_of_week or []),
            },
        }

    def clean(self):
        try:
            validate_event(self.to_record())
        except PreconditionViolatedError as exc:
            raise ValidationError(exc.message)

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)


class Task(models.Model):
    '''
    Deadline-bound unit of work
    expected_completion_time is in minutes; completion_level and priority are 0-100
    '''
    schedule = models.ForeignKey(Schedule, on_delete=models.CASCADE, related_name="tasks")
    name = models.CharField(max_length=200)
    deadline = models.DateTimeField()
    expected_completion_time = models.PositiveIntegerField()
    completion_level = models.PositiveSmallIntegerField(default=0)
    priority = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TaskQuerySet.as_manager()

    class Meta:
        db_table = "schedule_task"
        ordering = ["deadline", "-priority", "id"]

    def __str__(self):
        return self.name

    def to_record(self):
        return {
            "id": self.pk,
            "name": self.name,
            "deadline": self.deadline,
            "expected_completion_time": self.expected_completion_time,
            "completion_level": self.completion_level,
            "priority": self.priority,
            "created_at": self.created_at,
        }

    def clean(self):
        try:
            validate_task(self.to_record())
        except PreconditionViolatedError as exc:
            raise ValidationError(exc.message)

    def save(self, *args, **kwargs):
        self.clean()
        super().save(*args, **kwargs)


class GeneratedSchedule(models.Model):
    '''
    A plan produced by Schedule.generate, kept per timestamp
    events/tasks are the ids the plan was built from; plan holds the items
    with ISO 8601 UTC times
    '''
    schedule = models.ForeignKey(Schedule, on_delete=models.CASCADE, related_name="generated")
    owner = models.CharField(max_length=255)
    timestamp = models.PositiveIntegerField()
    events = models.JSONField(default=list, blank=True)
    tasks = models.JSONField(default=list, blank=True)
    plan = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = GeneratedScheduleManager()

    class Meta:
        db_table = "schedule_generated"
        ordering = ["schedule", "timestamp"]
        constraints = [
            models.UniqueConstraint(fields=["schedule", "timestamp"], name="unique_generated_timestamp"),
        ]

    def __str__(self):
        return f"GeneratedSchedule {self.pk} (Schedule: {self.schedule_id}, Timestamp: {self.timestamp})"

    def plan_items(self):
        '''
        Stored items with their times turned back into aware datetimes
        '''
        return [
            dict(
                item,
                scheduled_start_time=to_utc(item["scheduled_start_time"]),
                scheduled_end_time=to_utc(item["scheduled_end_time"]),
            )
            for item in self.plan
        ]
