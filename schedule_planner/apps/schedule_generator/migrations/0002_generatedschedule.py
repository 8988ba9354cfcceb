import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("schedule_generator", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="GeneratedSchedule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("owner", models.CharField(max_length=255)),
                ("timestamp", models.PositiveIntegerField()),
                ("events", models.JSONField(blank=True, default=list)),
                ("tasks", models.JSONField(blank=True, default=list)),
                ("plan", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "schedule",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="generated",
                        to="schedule_generator.schedule",
                    ),
                ),
            ],
            options={
                "db_table": "schedule_generated",
                "ordering": ["schedule", "timestamp"],
            },
        ),
        migrations.AddConstraint(
            model_name="generatedschedule",
            constraint=models.UniqueConstraint(fields=("schedule", "timestamp"), name="unique_generated_timestamp"),
        ),
    ]
