import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Schedule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("owner", models.CharField(max_length=255, unique=True)),
                ("timestamp", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "schedule",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField()),
                ("repeat_frequency", models.CharField(
                    choices=[("NONE", "None"), ("DAILY", "Daily"), ("WEEKLY", "Weekly"),
                             ("MONTHLY", "Monthly"), ("YEARLY", "Yearly")],
                    default="NONE", max_length=10,
                )),
                ("days_of_week", models.JSONField(blank=True, default=list)),
                ("schedule", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="events",
                    to="schedule_generator.schedule",
                )),
            ],
            options={
                "db_table": "schedule_event",
                "ordering": ["start_time", "id"],
            },
        ),
        migrations.CreateModel(
            name="Task",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("deadline", models.DateTimeField()),
                ("expected_completion_time", models.PositiveIntegerField()),
                ("completion_level", models.PositiveSmallIntegerField(default=0)),
                ("priority", models.PositiveSmallIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("schedule", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE, related_name="tasks",
                    to="schedule_generator.schedule",
                )),
            ],
            options={
                "db_table": "schedule_task",
                "ordering": ["deadline", "-priority", "id"],
            },
        ),
    ]
