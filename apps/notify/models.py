"""
Notification log model.

Every notification the portal tries to send is recorded here first. The
(user, event_kind, fingerprint) uniqueness constraint is what makes
recording idempotent; see apps.notify.idempotency.
"""

import uuid

from django.conf import settings
from django.db import models


class NotificationEventKind(models.TextChoices):
    """Kinds of events that produce a notification."""

    APPLICATION_SUBMITTED = "application_submitted", "Application submitted"
    STATUS_UPDATED = "status_updated", "Status updated"


class NotificationStatus(models.TextChoices):
    """Delivery status of a logged notification."""

    PENDING = "pending", "Pending"
    SENT = "sent", "Sent"
    FAILED = "failed", "Failed"


class NotificationLog(models.Model):
    """
    One logical notification, recorded at most once per dedup window.

    Content fields are written once at insert. Only ``status`` and ``error``
    change afterwards, as delivery bookkeeping.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="notification_logs",
        help_text="Subject user the notification is about / addressed to.",
    )
    event_kind = models.CharField(
        max_length=50,
        choices=NotificationEventKind.choices,
        db_index=True,
    )
    fingerprint = models.CharField(
        max_length=64,
        help_text="sha256 of user, event kind, essential payload and minute bucket.",
    )
    status = models.CharField(
        max_length=20,
        choices=NotificationStatus.choices,
        default=NotificationStatus.PENDING,
        db_index=True,
    )

    # Message snapshot
    subject = models.CharField(max_length=255, blank=True, default="")
    recipient = models.CharField(max_length=255, blank=True, default="")
    body = models.TextField(blank=True, default="")
    payload = models.JSONField(
        default=dict,
        blank=True,
        help_text="Snapshot of the event payload the fingerprint was computed from.",
    )
    error = models.TextField(blank=True, default="")

    # Token written by the inserting call; lets record() tell its own row apart.
    delivery_token = models.UUIDField(default=uuid.uuid4, editable=False)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "event_kind", "fingerprint"],
                name="notification_logs_idempotency_unique",
            ),
        ]
        indexes = [
            models.Index(fields=["user", "event_kind"], name="notify_noti_user_id_4c8e1d_idx"),
        ]

    def __str__(self):
        return f"{self.event_kind} → {self.recipient or self.user_id} [{self.status}]"

    def mark_delivery(self, success: bool, error: str = "") -> None:
        """Record the delivery outcome without touching the content fields."""
        self.status = NotificationStatus.SENT if success else NotificationStatus.FAILED
        self.error = "" if success else error
        self.save(update_fields=["status", "error", "updated_at"])
