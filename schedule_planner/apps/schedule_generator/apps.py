from django.apps import AppConfig


class ScheduleGeneratorConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.schedule_generator"
    label = "schedule_generator"
