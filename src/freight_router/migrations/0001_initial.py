from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="RoutePlan",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("pickup_city", models.CharField(max_length=100)),
                ("pickup_state", models.CharField(max_length=50)),
                ("delivery_city", models.CharField(max_length=100)),
                ("delivery_state", models.CharField(max_length=50)),
                ("contact_email", models.CharField(max_length=254)),
                ("route_count", models.PositiveIntegerField(default=0)),
                ("excluded_count", models.PositiveIntegerField(default=0)),
                ("best_score", models.FloatField(blank=True, null=True)),
                ("response", models.JSONField(default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ("-created_at",),
                "indexes": [
                    models.Index(fields=["contact_email"], name="route_plan_contact_idx")
                ],
            },
        ),
    ]
