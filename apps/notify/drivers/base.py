"""Base driver and data structures for notification delivery.

Drivers deliver one message through one channel (email backend, log sink, ...)
and report the outcome as a result dict instead of raising for transport
errors.

Public API:
- NotificationMessage
- BaseNotifyDriver
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class NotificationMessage:
    """Standardized notification message format that all drivers handle."""

    recipient: str
    subject: str
    body: str

    # Optional fields with defaults
    event_kind: str = ""
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.recipient = (self.recipient or "").strip()
        self.subject = " ".join((self.subject or "").split())


class BaseNotifyDriver(ABC):
    """Abstract base class for notification delivery drivers."""

    name: str = "base"

    @abstractmethod
    def validate_config(self, config: dict[str, Any]) -> bool:
        """Validate that the driver configuration is valid."""

    @abstractmethod
    def send(self, message: NotificationMessage, config: dict[str, Any]) -> dict[str, Any]:
        """Send a notification and return result metadata.

        Args:
            message: The notification message to send
            config: Driver-specific configuration

        Returns:
            Dictionary with keys like:
            - success: bool
            - message_id: str (if available)
            - error: str (if failed)
            - metadata: dict (any additional info)
        """

    def _handle_exception(self, e: Exception, service_name: str, action: str) -> dict[str, Any]:
        """Handle general exceptions consistently across drivers."""
        logger.exception(f"Failed to {action} {service_name}: {e}")
        return {"success": False, "error": f"Failed to {action} {service_name}: {e}"}
