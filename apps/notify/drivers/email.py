"""Email notification driver (Django mail backend)."""

import logging
import uuid
from typing import Any

from django.conf import settings
from django.core.mail import EmailMessage, get_connection

from apps.notify.drivers.base import BaseNotifyDriver, NotificationMessage

logger = logging.getLogger(__name__)


class EmailNotifyDriver(BaseNotifyDriver):
    """Driver for sending notification emails through settings.EMAIL_BACKEND."""

    name = "email"

    def validate_config(self, config: dict[str, Any]) -> bool:
        from_address = config.get("from_address") or getattr(settings, "DEFAULT_FROM_EMAIL", "")
        return bool(from_address)

    def _build_email(self, message: NotificationMessage, config: dict[str, Any]) -> EmailMessage:
        from_address = config.get("from_address") or settings.DEFAULT_FROM_EMAIL
        message_id = str(uuid.uuid4())
        domain = from_address.rsplit("@", 1)[-1]
        return EmailMessage(
            subject=message.subject,
            body=message.body,
            from_email=from_address,
            to=[message.recipient],
            headers={"Message-ID": f"<{message_id}@{domain}>"},
        )

    def send(self, message: NotificationMessage, config: dict[str, Any]) -> dict[str, Any]:
        if not self.validate_config(config):
            return {"success": False, "error": "Invalid email configuration (from_address required)"}
        if not message.recipient:
            return {"success": False, "error": "Recipient address is empty"}

        try:
            email = self._build_email(message, config)
            connection = get_connection(
                backend=config.get("backend"),
                fail_silently=False,
                timeout=config.get("timeout", 30),
            )
            sent = connection.send_messages([email]) or 0
        except Exception as e:
            return self._handle_exception(e, "Email", "send email")

        if not sent:
            return {"success": False, "error": "Email backend accepted no messages"}

        message_id = email.extra_headers["Message-ID"]
        logger.info(f"Email sent successfully: {message_id}")
        return {
            "success": True,
            "message_id": message_id,
            "metadata": {
                "to": [message.recipient],
                "from": email.from_email,
                "subject": message.subject,
            },
        }
