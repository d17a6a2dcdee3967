"""Log notification driver.

Writes the would-be email to the ``apps.notify.mail`` logger. Default
driver for development and demo deployments without a mail server.
"""

import logging
import uuid
from typing import Any

from apps.notify.drivers.base import BaseNotifyDriver, NotificationMessage

mail_logger = logging.getLogger("apps.notify.mail")


class LogNotifyDriver(BaseNotifyDriver):
    """Driver that records notifications in the application log."""

    name = "log"

    def validate_config(self, config: dict[str, Any]) -> bool:
        level = (config or {}).get("level", "INFO")
        return isinstance(logging.getLevelName(str(level).upper()), int)

    def send(self, message: NotificationMessage, config: dict[str, Any]) -> dict[str, Any]:
        config = config or {}
        if not self.validate_config(config):
            return {"success": False, "error": f"Invalid log level: {config.get('level')}"}

        level = logging.getLevelName(str(config.get("level", "INFO")).upper())
        message_id = f"log_{uuid.uuid4().hex[:12]}"
        mail_logger.log(
            level,
            "Notification email",
            extra={
                "message_id": message_id,
                "to": message.recipient,
                "subject": message.subject,
                "body": message.body,
                "event_kind": message.event_kind,
                **{f"ctx_{key}": value for key, value in message.context.items()},
            },
        )
        return {
            "success": True,
            "message_id": message_id,
            "metadata": {"to": [message.recipient], "subject": message.subject},
        }
