"""
Notification drivers for delivering portal notifications.
"""

from apps.notify.drivers.base import BaseNotifyDriver, NotificationMessage
from apps.notify.drivers.email import EmailNotifyDriver
from apps.notify.drivers.log import LogNotifyDriver

__all__ = [
    "NotificationMessage",
    "BaseNotifyDriver",
    "EmailNotifyDriver",
    "LogNotifyDriver",
    "DRIVER_REGISTRY",
    "get_driver",
    "is_notify_enabled",
    "get_enabled_notify_drivers",
]

# Registry of available notification drivers
DRIVER_REGISTRY: dict[str, type[BaseNotifyDriver]] = {
    "email": EmailNotifyDriver,
    "log": LogNotifyDriver,
}


def get_driver(name: str) -> BaseNotifyDriver:
    """
    Instantiate a registered driver.

    Raises:
        ValueError: If no driver is registered under ``name``.
    """
    driver_cls = DRIVER_REGISTRY.get(name)
    if driver_cls is None:
        raise ValueError(f"Unknown notify driver: {name}. Available: {list(DRIVER_REGISTRY)}")
    return driver_cls()


def is_notify_enabled(driver_name: str) -> bool:
    """
    Check if a notification driver is enabled.

    Disabled when:
    - NOTIFY_SKIP_ALL=True, or
    - driver_name is in NOTIFY_SKIP

    Args:
        driver_name: Name of the driver to check.

    Returns:
        True if the driver is enabled, False if skipped.
    """
    from django.conf import settings

    if getattr(settings, "NOTIFY_SKIP_ALL", False):
        return False

    skip_list = getattr(settings, "NOTIFY_SKIP", [])
    return driver_name not in skip_list


def get_enabled_notify_drivers() -> dict[str, type[BaseNotifyDriver]]:
    """Registry of drivers not listed in settings.NOTIFY_SKIP."""
    return {name: cls for name, cls in DRIVER_REGISTRY.items() if is_notify_enabled(name)}
