from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="BestScore",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, help_text="Time when the record was created.")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Time when the record was last updated.")),
                ("namespace", models.CharField(db_index=True, help_text="Game namespace, e.g. 2048.", max_length=32)),
                ("size", models.PositiveSmallIntegerField(help_text="Board edge length.")),
                ("score", models.PositiveIntegerField(default=0, help_text="Best score reached.")),
            ],
            options={
                "verbose_name": "Best Score",
                "verbose_name_plural": "Best Scores",
                "ordering": ["namespace", "size"],
                "unique_together": {("namespace", "size")},
            },
        ),
    ]
