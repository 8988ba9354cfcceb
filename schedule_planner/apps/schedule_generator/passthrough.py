'''
Name: apps/schedule_generator/passthrough.py
Description: Which concept routes may be called directly over HTTP.
Authors: Schedule planner maintainers
Created: October 6, 2026
Last Modified: October 19, 2026

POST /api/{Concept}/{action or query} passes straight through to the concept.
Only routes listed in INCLUSIONS are served; each needs a justification.
Routes in EXCLUSIONS are reserved for request-level handling (they expose
data across owners) and are rejected by the passthrough view.
'''

INCLUSIONS = {
    "/api/ScheduleGenerator/initializeSchedule": "a user creates (or reopens) their own schedule",
    "/api/ScheduleGenerator/addEvent": "owners edit their own events",
    "/api/ScheduleGenerator/editEvent": "owners edit their own events",
    "/api/ScheduleGenerator/deleteEvent": "owners edit their own events",
    "/api/ScheduleGenerator/importEvents": "owners import their own calendars",
    "/api/ScheduleGenerator/addTask": "owners edit their own tasks",
    "/api/ScheduleGenerator/editTask": "owners edit their own tasks",
    "/api/ScheduleGenerator/deleteTask": "owners edit their own tasks",
    "/api/ScheduleGenerator/generateSchedule": "generates and stores a plan for one schedule",
    "/api/ScheduleGenerator/_getScheduleByOwner": "looks up the caller's schedule",
    "/api/ScheduleGenerator/_getScheduleDetails": "scoped to a single schedule",
    "/api/ScheduleGenerator/_getEventsForSchedule": "scoped to a single schedule",
    "/api/ScheduleGenerator/_getTasksForSchedule": "scoped to a single schedule",
    "/api/ScheduleGenerator/_getEventDetails": "scoped to a single event",
    "/api/ScheduleGenerator/_getTaskDetails": "scoped to a single task",
    "/api/ScheduleGenerator/_getGeneratedSchedule": "reads stored plans of a single schedule",
}

EXCLUSIONS = [
    "/api/ScheduleGenerator/_getAllSchedules",
    "/api/ScheduleGenerator/_getAllEvents",
    "/api/ScheduleGenerator/_getAllTasks",
]


def is_passthrough(route):
    return route in INCLUSIONS and route not in EXCLUSIONS
