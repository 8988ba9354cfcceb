'''
Name: apps/schedule_generator/urls.py
Description: URL configurations for the schedule generator.
Authors: Schedule planner maintainers
Created: October 6, 2026
Last Modified: October 12, 2026
'''

from django.urls import path

from .views import concept_action, export_schedule

app_name = "schedule_generator"

urlpatterns = [
    path("ScheduleGenerator/exportSchedule", export_schedule, name="export_schedule"),
    path("ScheduleGenerator/<str:action>", concept_action, name="concept_action"),
]
