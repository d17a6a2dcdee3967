"""Tests for BaseNotifyDriver helpers, NotificationMessage and the registry."""

import pytest
from django.test import SimpleTestCase, override_settings

from apps.notify.drivers import (
    DRIVER_REGISTRY,
    EmailNotifyDriver,
    LogNotifyDriver,
    get_driver,
    get_enabled_notify_drivers,
    is_notify_enabled,
)
from apps.notify.drivers.base import BaseNotifyDriver, NotificationMessage


class DummyDriver(BaseNotifyDriver):
    name = "dummy"

    def validate_config(self, config: dict[str, object]) -> bool:
        return True

    def send(self, message: NotificationMessage, config: dict[str, object]) -> dict[str, object]:
        return {"success": True}


class TestNotificationMessage(SimpleTestCase):
    """Tests for NotificationMessage."""

    def test_normalizes_recipient_and_subject(self):
        msg = NotificationMessage(
            recipient="  student@example.com ", subject="Status\n  Updated", body="b"
        )
        assert msg.recipient == "student@example.com"
        assert msg.subject == "Status Updated"

    def test_defaults(self):
        msg = NotificationMessage(recipient="a@example.com", subject="s", body="b")
        assert msg.event_kind == ""
        assert msg.context == {}


class TestBaseNotifyDriver(SimpleTestCase):
    def test_handle_exception_returns_failure(self):
        result = DummyDriver()._handle_exception(RuntimeError("boom"), "Email", "send email")
        assert result == {"success": False, "error": "Failed to send email Email: boom"}


class TestRegistry(SimpleTestCase):
    def test_registry_contents(self):
        assert DRIVER_REGISTRY == {"email": EmailNotifyDriver, "log": LogNotifyDriver}

    def test_get_driver_instantiates(self):
        assert isinstance(get_driver("log"), LogNotifyDriver)

    def test_get_driver_unknown(self):
        with pytest.raises(ValueError, match="Unknown notify driver"):
            get_driver("sms")

    @override_settings(NOTIFY_SKIP=["email"], NOTIFY_SKIP_ALL=False)
    def test_skip_list(self):
        assert not is_notify_enabled("email")
        assert is_notify_enabled("log")
        assert list(get_enabled_notify_drivers()) == ["log"]

    @override_settings(NOTIFY_SKIP=[], NOTIFY_SKIP_ALL=True)
    def test_skip_all(self):
        assert not is_notify_enabled("log")
        assert get_enabled_notify_drivers() == {}
