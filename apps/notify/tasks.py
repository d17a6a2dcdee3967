"""Celery tasks delivering workflow notifications.

Tasks receive events as plain dicts (JSON serializer). A retried task
re-records the same event; inside the dedup window the idempotent log
returns the existing entry and nothing is sent twice.
"""

from __future__ import annotations

from typing import Any

from celery import shared_task


@shared_task(
    bind=True, autoretry_for=(Exception,), retry_backoff=60, retry_jitter=True, max_retries=3
)
def send_status_update_notification(self, event: dict[str, Any]) -> dict[str, Any]:
    from apps.applications.dtos import StatusChangedEvent
    from apps.notify.dispatch import NotificationDispatcher

    result = NotificationDispatcher().dispatch_status_changed(StatusChangedEvent.from_dict(event))
    return result.to_dict()


@shared_task(
    bind=True, autoretry_for=(Exception,), retry_backoff=60, retry_jitter=True, max_retries=3
)
def send_application_confirmation(self, event: dict[str, Any]) -> dict[str, Any]:
    from apps.applications.dtos import ApplicationSubmittedEvent
    from apps.notify.dispatch import NotificationDispatcher

    result = NotificationDispatcher().dispatch_application_submitted(
        ApplicationSubmittedEvent.from_dict(event)
    )
    return result.to_dict()
