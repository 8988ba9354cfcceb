import json

from django.test import TestCase

from apps.schedule_generator.models import Schedule, Event, GeneratedSchedule
from apps.schedule_generator.views import dispatch
from .factories import at
from .test_ics import LECTURES_ICS


class ConceptActionViewTests(TestCase):

    def post(self, action, body):
        return self.client.post(
            f"/api/ScheduleGenerator/{action}",
            data=json.dumps(body),
            content_type="application/json",
        )

    def setUp(self):
        resp = self.post("initializeSchedule", {"owner": "user:alice"})
        self.assertEqual(resp.status_code, 200)
        self.schedule_id = resp.json()["schedule"]

    def test_add_and_generate(self):
        resp = self.post("addEvent", {
            "schedule": self.schedule_id,
            "name": "Standup",
            "startTime": at(0, 9).isoformat(),
            "endTime": at(0, 10).isoformat(),
            "repeat": {"frequency": "DAILY", "daysOfWeek": []},
        })
        self.assertEqual(resp.status_code, 200)
        event_id = resp.json()["event"]

        resp = self.post("addTask", {
            "schedule": self.schedule_id,
            "name": "Report",
            "deadline": at(1, 17).isoformat(),
            "expectedCompletionTime": 120,
            "priority": 90,
        })
        self.assertEqual(resp.status_code, 200)
        task_id = resp.json()["task"]

        resp = self.post("generateSchedule", {"schedule": self.schedule_id, "now": at(0, 7).isoformat()})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["scheduleId"], self.schedule_id)
        self.assertEqual(body["timestamp"], 1)
        self.assertEqual(GeneratedSchedule.objects.get(pk=body["newSchedule"]).timestamp, 1)
        tasks = [i for i in body["generatedPlan"] if i["type"] == "task"]
        self.assertEqual(len(tasks), 1)
        self.assertEqual(tasks[0]["originalId"], task_id)
        self.assertEqual(tasks[0]["scheduledStartTime"], at(0, 10).isoformat())
        events = [i for i in body["generatedPlan"] if i["type"] == "event"]
        self.assertEqual(len(events), 7)
        self.assertTrue(all(i["originalId"] == event_id for i in events))

    def test_invalid_event_rejected(self):
        resp = self.post("addEvent", {
            "schedule": self.schedule_id,
            "name": "Backwards",
            "startTime": at(0, 10).isoformat(),
            "endTime": at(0, 9).isoformat(),
        })
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "Event start time must be before end time."})

    def test_missing_task_field_rejected(self):
        resp = self.post("addTask", {"schedule": self.schedule_id, "name": "Report", "deadline": at(1, 17).isoformat()})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("expectedCompletionTime", resp.json()["error"])

    def test_unknown_schedule(self):
        resp = self.post("deleteEvent", {"schedule": "nonExistentSchedule123", "event": 1})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Schedule with ID nonExistentSchedule123 not found."})

    def test_infeasible_generation_is_conflict(self):
        self.post("addEvent", {
            "schedule": self.schedule_id,
            "name": "Shift",
            "startTime": at(0, 8).isoformat(),
            "endTime": at(0, 22).isoformat(),
            "repeat": "DAILY",
        })
        self.post("addTask", {
            "schedule": self.schedule_id,
            "name": "Call",
            "deadline": at(3, 12).isoformat(),
            "expectedCompletionTime": 60,
            "priority": 10,
        })
        resp = self.post("generateSchedule", {"schedule": self.schedule_id, "now": at(0, 7).isoformat()})
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["kind"], "InfeasibleSchedule")
        self.assertEqual(Schedule.objects.get(pk=self.schedule_id).timestamp, 0)

    def test_queries(self):
        self.assertEqual(self.post("_getScheduleByOwner", {"owner": "user:alice"}).json(), {"schedule": self.schedule_id})
        event_id = self.post("addEvent", {
            "schedule": self.schedule_id,
            "name": "Dentist",
            "startTime": at(1, 15).isoformat(),
            "endTime": at(1, 16).isoformat(),
        }).json()["event"]

        self.assertEqual(self.post("_getEventsForSchedule", {"schedule": self.schedule_id}).json(), {"event": [event_id]})
        details = self.post("_getEventDetails", {"event": event_id}).json()["eventDetails"][0]
        self.assertEqual(details["name"], "Dentist")
        self.assertEqual(details["repeat"], {"frequency": "NONE", "daysOfWeek": []})

        resp = self.post("_getTaskDetails", {"task": 999})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "Task with ID 999 not found."})

    def test_import_events(self):
        resp = self.post("importEvents", {"schedule": self.schedule_id, "ics": LECTURES_ICS})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.json()["events"]), 3)
        lecture = Event.objects.get(name="Lecture")
        self.assertEqual(lecture.repeat_frequency, "WEEKLY")
        self.assertEqual(lecture.days_of_week, [0, 2])

    def test_unreadable_import_rejected(self):
        resp = self.post("importEvents", {"schedule": self.schedule_id, "ics": "not a calendar"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(Event.objects.count(), 0)

    def test_excluded_and_unknown_routes(self):
        self.assertEqual(self.post("_getAllEvents", {}).status_code, 404)
        self.assertEqual(self.post("frobnicate", {}).status_code, 404)
        self.assertEqual(dispatch("_getAllSchedules", {})[0], 404)

    def test_generated_schedule_query(self):
        self.post("addTask", {
            "schedule": self.schedule_id,
            "name": "Report",
            "deadline": at(1, 17).isoformat(),
            "expectedCompletionTime": 120,
            "priority": 90,
        })
        resp = self.post("_getGeneratedSchedule", {"schedule": self.schedule_id})
        self.assertEqual(resp.status_code, 404)

        generated = self.post("generateSchedule", {"schedule": self.schedule_id, "now": at(0, 7).isoformat()}).json()
        resp = self.post("_getGeneratedSchedule", {"schedule": self.schedule_id, "timestamp": 1})
        self.assertEqual(resp.status_code, 200)
        stored = resp.json()["generatedSchedule"][0]
        self.assertEqual(stored["_id"], generated["newSchedule"])
        self.assertEqual(stored["owner"], "user:alice")
        self.assertEqual(stored["timestamp"], 1)
        self.assertEqual(stored["generatedPlan"], generated["generatedPlan"])

        resp = self.post("_getGeneratedSchedule", {"schedule": self.schedule_id, "timestamp": "latest"})
        self.assertEqual(resp.status_code, 400)

    def test_malformed_generation_inputs_are_conflicts(self):
        for extra in ({"workWindow": ["08:00"]}, {"workWindow": "08:00-17:00"}, {"horizonDays": "a week"}):
            resp = self.post("generateSchedule", dict(extra, schedule=self.schedule_id, now=at(0, 7).isoformat()))
            self.assertEqual(resp.status_code, 409, extra)
            self.assertEqual(resp.json()["kind"], "PreconditionViolated")
        self.assertEqual(Schedule.objects.get(pk=self.schedule_id).timestamp, 0)

    def test_bad_requests(self):
        resp = self.client.post("/api/ScheduleGenerator/addTask", data="{nope", content_type="application/json")
        self.assertEqual(resp.status_code, 400)
        resp = self.post("addTask", ["not", "an", "object"])
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.client.get("/api/ScheduleGenerator/addTask").status_code, 405)


class ExportScheduleViewTests(TestCase):

    def setUp(self):
        self.schedule = Schedule.objects.initialize("user:bob")
        self.schedule.add_event("Standup", at(0, 9), at(0, 10), "DAILY")
        self.report = self.schedule.add_task("Report", at(1, 17), 120, 90)

    def export(self, **params):
        return self.client.get("/api/ScheduleGenerator/exportSchedule", dict(params, schedule=self.schedule.pk))

    def test_streams_stored_plan(self):
        self.schedule.generate(now=at(0, 7))
        resp = self.export()
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp["Content-Type"], "text/calendar")
        self.assertIn("GeneratedSchedule.ics", resp["Content-Disposition"])
        text = b"".join(resp.streaming_content).decode()
        self.assertIn("BEGIN:VCALENDAR", text)
        self.assertIn("SUMMARY:Report", text)
        # reading does not regenerate
        self.schedule.refresh_from_db()
        self.assertEqual(self.schedule.timestamp, 1)
        self.assertEqual(GeneratedSchedule.objects.count(), 1)

    def test_export_by_timestamp(self):
        self.schedule.generate(now=at(0, 7))
        self.schedule.edit_task(self.report.pk, "Final report", at(1, 17), 120, 0, 90)
        self.schedule.generate(now=at(0, 7))

        latest = b"".join(self.export().streaming_content).decode()
        self.assertIn("SUMMARY:Final report", latest)
        first = b"".join(self.export(timestamp=1).streaming_content).decode()
        self.assertIn("SUMMARY:Report", first)
        self.assertNotIn("Final report", first)

    def test_nothing_generated_yet(self):
        resp = self.export()
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": f"No generated schedule found for schedule {self.schedule.pk}."})
        self.assertEqual(self.export(timestamp="x").status_code, 400)

    def test_unknown_schedule(self):
        resp = self.client.get("/api/ScheduleGenerator/exportSchedule", {"schedule": 9999})
        self.assertEqual(resp.status_code, 404)
