import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="NotificationLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "event_kind",
                    models.CharField(
                        choices=[
                            ("application_submitted", "Application submitted"),
                            ("status_updated", "Status updated"),
                        ],
                        db_index=True,
                        max_length=50,
                    ),
                ),
                (
                    "fingerprint",
                    models.CharField(
                        help_text="sha256 of user, event kind, essential payload and minute bucket.",
                        max_length=64,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("sent", "Sent"), ("failed", "Failed")],
                        db_index=True,
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("subject", models.CharField(blank=True, default="", max_length=255)),
                ("recipient", models.CharField(blank=True, default="", max_length=255)),
                ("body", models.TextField(blank=True, default="")),
                (
                    "payload",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Snapshot of the event payload the fingerprint was computed from.",
                    ),
                ),
                ("error", models.TextField(blank=True, default="")),
                ("delivery_token", models.UUIDField(default=uuid.uuid4, editable=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Subject user the notification is about / addressed to.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="notification_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["user", "event_kind"], name="notify_noti_user_id_4c8e1d_idx")],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "event_kind", "fingerprint"),
                        name="notification_logs_idempotency_unique",
                    )
                ],
            },
        ),
    ]
