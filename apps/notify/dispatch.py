"""
Notification dispatch for application workflow events.

Turns a domain event into (subject user, event kind, payload), records it in
the idempotent log and, only when the log created a new entry, delivers it
through the configured driver. Delivery outcome is written to the entry's
status; a failed delivery never removes the entry and never affects the
status transition that produced the event.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from django.conf import settings
from django.contrib.auth import get_user_model

from apps.applications.dtos import ApplicationSubmittedEvent, StatusChangedEvent
from apps.applications.models import ApplicationStatus, Opportunity
from apps.notify.drivers import BaseNotifyDriver, NotificationMessage, get_driver, is_notify_enabled
from apps.notify.idempotency import IdempotentEventLog
from apps.notify.models import NotificationEventKind, NotificationLog

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Outcome of dispatching one event."""

    entry: NotificationLog
    was_created: bool
    delivered: bool = False
    skipped_reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "notification_log_id": self.entry.pk,
            "was_created": self.was_created,
            "delivered": self.delivered,
            "status": self.entry.status,
            "skipped_reason": self.skipped_reason,
        }


class NotificationDispatcher:
    """
    Consumes workflow events and hands new notifications to a delivery driver.

    Usage:
        dispatcher = NotificationDispatcher()
        dispatcher.dispatch_status_changed(result.event)
    """

    def __init__(
        self,
        event_log: IdempotentEventLog | None = None,
        driver: BaseNotifyDriver | None = None,
        driver_config: dict[str, Any] | None = None,
    ):
        self.event_log = event_log or IdempotentEventLog()
        self.driver = driver or get_driver(settings.NOTIFY_DRIVER)
        self.driver_config = (
            driver_config if driver_config is not None else dict(settings.NOTIFY_CONFIG)
        )

    def dispatch_status_changed(self, event: StatusChangedEvent) -> DispatchResult:
        user = get_user_model().objects.get(pk=event.user_id)
        opportunity = Opportunity.objects.get(pk=event.opportunity_id)
        old_label = ApplicationStatus(event.old_status).label
        new_label = ApplicationStatus(event.new_status).label

        message = NotificationMessage(
            recipient=user.email,
            subject=f"Application Status Updated: {new_label}",
            body=(
                f"Dear {self._display_name(user)}, your application for {opportunity.title} "
                f"at {opportunity.organization} has been updated from {old_label} to {new_label}."
            ),
            event_kind=NotificationEventKind.STATUS_UPDATED,
            context={"application_id": event.application_id, "new_status": event.new_status},
        )
        return self._dispatch(user.pk, event.payload(), message)

    def dispatch_application_submitted(self, event: ApplicationSubmittedEvent) -> DispatchResult:
        user = get_user_model().objects.get(pk=event.user_id)
        opportunity = Opportunity.objects.get(pk=event.opportunity_id)

        message = NotificationMessage(
            recipient=user.email,
            subject="Application Submitted Successfully",
            body=(
                f"Dear {self._display_name(user)}, your application for {opportunity.title} "
                f"at {opportunity.organization} has been submitted successfully."
            ),
            event_kind=NotificationEventKind.APPLICATION_SUBMITTED,
            context={"application_id": event.application_id},
        )
        return self._dispatch(user.pk, event.payload(), message)

    def _dispatch(
        self, user_id: int, payload: dict[str, Any], message: NotificationMessage
    ) -> DispatchResult:
        recorded = self.event_log.record(
            user_id,
            message.event_kind,
            payload,
            subject=message.subject,
            recipient=message.recipient,
            body=message.body,
        )
        result = DispatchResult(entry=recorded.entry, was_created=recorded.was_created)

        if not recorded.was_created:
            result.skipped_reason = "duplicate"
            return result

        if not is_notify_enabled(self.driver.name):
            result.skipped_reason = f"driver '{self.driver.name}' disabled"
            logger.info(
                "Notification delivery skipped",
                extra={"notification_log_id": recorded.entry.pk, "driver": self.driver.name},
            )
            return result

        result.delivered = self._deliver(recorded.entry, message)
        return result

    def _deliver(self, entry: NotificationLog, message: NotificationMessage) -> bool:
        try:
            outcome = self.driver.send(message, self.driver_config)
        except Exception as e:
            logger.exception(
                "Notification driver raised",
                extra={"notification_log_id": entry.pk, "driver": self.driver.name},
            )
            outcome = {"success": False, "error": str(e)}

        success = bool(outcome.get("success"))
        entry.mark_delivery(success, outcome.get("error", ""))

        if success:
            logger.info(
                "Notification delivered",
                extra={
                    "notification_log_id": entry.pk,
                    "driver": self.driver.name,
                    "event_kind": entry.event_kind,
                },
            )
        else:
            logger.warning(
                "Notification delivery failed: %s",
                outcome.get("error", "unknown error"),
                extra={"notification_log_id": entry.pk, "driver": self.driver.name},
            )
        return success

    @staticmethod
    def _display_name(user) -> str:
        return user.get_full_name() or user.get_username()
