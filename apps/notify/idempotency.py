"""
Idempotent notification log.

record() inserts a NotificationLog row unless one already exists for the
same (user, event kind, fingerprint). The fingerprint includes the current
time truncated to the minute, so repeated triggers of one logical event
inside the same minute collapse into a single row, while triggers in
different minutes are distinct. Identical legitimate events inside one
minute also collapse; that window is intentional.

The insert is a single INSERT ... ON CONFLICT DO NOTHING against the unique
constraint, so concurrent callers cannot both create a row.
"""

from __future__ import annotations

import hashlib
import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from typing import Any

from django.utils import timezone

from apps.notify.models import NotificationLog, NotificationStatus

logger = logging.getLogger(__name__)

BUCKET_FORMAT = "%Y-%m-%d %H:%M"


def minute_bucket(at: datetime) -> str:
    if timezone.is_aware(at):
        at = at.astimezone(dt_timezone.utc)
    return at.strftime(BUCKET_FORMAT)


def compute_fingerprint(
    subject_user_id: int, event_kind: str, payload: dict[str, Any], at: datetime
) -> str:
    canonical = json.dumps(
        {
            "user_id": subject_user_id,
            "event_kind": str(event_kind),
            "payload": payload or {},
            "timestamp": minute_bucket(at),
        },
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


@dataclass
class RecordResult:
    entry: NotificationLog
    was_created: bool


class IdempotentEventLog:
    """Insert-if-absent store for notification records."""

    def record(
        self,
        subject_user_id: int,
        event_kind: str,
        payload: dict[str, Any],
        *,
        subject: str = "",
        recipient: str = "",
        body: str = "",
        now: datetime | None = None,
    ) -> RecordResult:
        """
        Record a notification for ``subject_user_id`` unless already recorded.

        A subject user is required: NULL users never conflict on the unique
        constraint, so entries without one could not be deduplicated.

        Returns:
            RecordResult whose ``was_created`` is False when an existing entry
            for the same fingerprint was returned unchanged.

        Raises:
            ValueError: If ``subject_user_id`` is None.
        """
        if subject_user_id is None:
            raise ValueError("subject_user_id is required to record a notification")

        fingerprint = compute_fingerprint(
            subject_user_id, event_kind, payload, now or timezone.now()
        )
        token = uuid.uuid4()

        NotificationLog.objects.bulk_create(
            [
                NotificationLog(
                    user_id=subject_user_id,
                    event_kind=event_kind,
                    fingerprint=fingerprint,
                    status=NotificationStatus.PENDING,
                    subject=subject,
                    recipient=recipient,
                    body=body,
                    payload=payload or {},
                    delivery_token=token,
                )
            ],
            ignore_conflicts=True,
        )

        entry = NotificationLog.objects.get(
            user_id=subject_user_id, event_kind=event_kind, fingerprint=fingerprint
        )
        was_created = entry.delivery_token == token

        if not was_created:
            logger.info(
                "Duplicate notification suppressed",
                extra={
                    "notification_log_id": entry.pk,
                    "user_id": subject_user_id,
                    "event_kind": str(event_kind),
                },
            )
        return RecordResult(entry=entry, was_created=was_created)
