"""Tests for NotificationDispatcher."""

from datetime import datetime, timezone as dt_timezone
from unittest.mock import patch

import pytest

from apps.applications.dtos import ApplicationSubmittedEvent, StatusChangedEvent
from apps.notify.dispatch import NotificationDispatcher
from apps.notify.drivers.base import BaseNotifyDriver
from apps.notify.models import NotificationEventKind, NotificationLog, NotificationStatus

FIXED_NOW = datetime(2024, 3, 1, 12, 0, 5, tzinfo=dt_timezone.utc)


class RecordingDriver(BaseNotifyDriver):
    name = "log"

    def __init__(self, outcome=None, raises=None):
        self.outcome = outcome or {"success": True, "message_id": "m-1"}
        self.raises = raises
        self.sent = []

    def validate_config(self, config):
        return True

    def send(self, message, config):
        self.sent.append(message)
        if self.raises:
            raise self.raises
        return self.outcome


@pytest.fixture(autouse=True)
def notify_enabled(settings):
    settings.NOTIFY_SKIP = []
    settings.NOTIFY_SKIP_ALL = False


def status_event(application, old="pending", new="under_review"):
    return StatusChangedEvent(
        application_id=application.pk,
        user_id=application.user_id,
        opportunity_id=application.opportunity_id,
        old_status=old,
        new_status=new,
        changed_by=1,
        actor_kind="admin",
    )


@pytest.mark.django_db
class TestDispatchStatusChanged:
    def test_new_event_is_recorded_and_delivered(self, application):
        driver = RecordingDriver()
        dispatcher = NotificationDispatcher(driver=driver, driver_config={})

        result = dispatcher.dispatch_status_changed(status_event(application))

        assert result.was_created is True
        assert result.delivered is True
        entry = NotificationLog.objects.get()
        assert entry.status == NotificationStatus.SENT
        assert entry.event_kind == NotificationEventKind.STATUS_UPDATED
        assert entry.user_id == application.user_id
        assert entry.subject == "Application Status Updated: Under Review"
        assert entry.body == (
            "Dear Grace Hopper, your application for Compiler Intern at Navy Labs "
            "has been updated from Pending to Under Review."
        )
        assert entry.payload == status_event(application).payload()
        assert driver.sent[0].recipient == "grace@example.com"

    def test_duplicate_event_is_not_delivered_twice(self, application):
        driver = RecordingDriver()
        dispatcher = NotificationDispatcher(driver=driver, driver_config={})
        event = status_event(application)

        with patch("apps.notify.idempotency.timezone.now", return_value=FIXED_NOW):
            first = dispatcher.dispatch_status_changed(event)
            second = dispatcher.dispatch_status_changed(event)

        assert first.delivered is True
        assert second.was_created is False
        assert second.delivered is False
        assert second.skipped_reason == "duplicate"
        assert second.entry.pk == first.entry.pk
        assert len(driver.sent) == 1
        assert NotificationLog.objects.count() == 1

    def test_driver_failure_keeps_entry_as_failed(self, application):
        driver = RecordingDriver(outcome={"success": False, "error": "mailbox full"})
        dispatcher = NotificationDispatcher(driver=driver, driver_config={})

        result = dispatcher.dispatch_status_changed(status_event(application))

        assert result.was_created is True
        assert result.delivered is False
        entry = NotificationLog.objects.get()
        assert entry.status == NotificationStatus.FAILED
        assert entry.error == "mailbox full"

    def test_driver_exception_is_recorded_not_raised(self, application):
        driver = RecordingDriver(raises=ConnectionError("smtp unreachable"))
        dispatcher = NotificationDispatcher(driver=driver, driver_config={})

        result = dispatcher.dispatch_status_changed(status_event(application))

        assert result.delivered is False
        entry = NotificationLog.objects.get()
        assert entry.status == NotificationStatus.FAILED
        assert entry.error == "smtp unreachable"

    def test_skipped_driver_leaves_entry_pending(self, application, settings):
        settings.NOTIFY_SKIP = ["log"]
        driver = RecordingDriver()
        dispatcher = NotificationDispatcher(driver=driver, driver_config={})

        result = dispatcher.dispatch_status_changed(status_event(application))

        assert result.skipped_reason == "driver 'log' disabled"
        assert driver.sent == []
        assert NotificationLog.objects.get().status == NotificationStatus.PENDING

    def test_distinct_transitions_are_distinct_notifications(self, application):
        driver = RecordingDriver()
        dispatcher = NotificationDispatcher(driver=driver, driver_config={})

        dispatcher.dispatch_status_changed(status_event(application))
        dispatcher.dispatch_status_changed(
            status_event(application, old="under_review", new="shortlisted")
        )

        assert NotificationLog.objects.count() == 2
        assert len(driver.sent) == 2


@pytest.mark.django_db
class TestDispatchApplicationSubmitted:
    def test_confirmation_is_sent(self, application):
        driver = RecordingDriver()
        dispatcher = NotificationDispatcher(driver=driver, driver_config={})

        result = dispatcher.dispatch_application_submitted(
            ApplicationSubmittedEvent(
                application_id=application.pk,
                user_id=application.user_id,
                opportunity_id=application.opportunity_id,
            )
        )

        assert result.delivered is True
        entry = result.entry
        assert entry.event_kind == NotificationEventKind.APPLICATION_SUBMITTED
        assert entry.subject == "Application Submitted Successfully"
        assert entry.body.endswith("has been submitted successfully.")
        assert result.to_dict()["status"] == NotificationStatus.SENT

    def test_default_driver_comes_from_settings(self, settings):
        settings.NOTIFY_DRIVER = "email"
        settings.NOTIFY_CONFIG = {"from_address": "careers@example.com"}

        dispatcher = NotificationDispatcher()

        assert dispatcher.driver.name == "email"
        assert dispatcher.driver_config == {"from_address": "careers@example.com"}
