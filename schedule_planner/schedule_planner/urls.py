'''
Name: schedule_planner/urls.py
Description: Root URL configuration.
Authors: Schedule planner maintainers
Created: October 6, 2026
Last Modified: October 12, 2026
'''

from django.urls import path, include

urlpatterns = [
    path("api/", include("apps.schedule_generator.urls")),
]
