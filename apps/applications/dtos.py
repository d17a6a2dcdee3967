"""
Data Transfer Objects for the application workflow.

Domain events are plain values: the transition engine returns them and the
notification layer consumes them (usually through a Celery task, so every
event round-trips through ``to_dict``/``from_dict``).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from django.utils.dateparse import parse_datetime

if TYPE_CHECKING:
    from apps.applications.models import Application, ApplicationStatusLog


@dataclass
class StatusChangedEvent:
    """Emitted once per committed status transition."""

    application_id: int
    user_id: int
    opportunity_id: int
    old_status: str
    new_status: str
    changed_by: int
    actor_kind: str
    note: str = ""
    occurred_at: datetime | None = None

    def payload(self) -> dict[str, Any]:
        """Essential fields identifying this event for notification dedup."""
        return {
            "application_id": self.application_id,
            "old_status": self.old_status,
            "new_status": self.new_status,
            "changed_by": self.changed_by,
            "actor_kind": self.actor_kind,
        }

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["occurred_at"] = self.occurred_at.isoformat() if self.occurred_at else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatusChangedEvent:
        values = dict(data)
        occurred_at = values.get("occurred_at")
        if isinstance(occurred_at, str):
            values["occurred_at"] = parse_datetime(occurred_at)
        return cls(**values)


@dataclass
class ApplicationSubmittedEvent:
    """Emitted after a new application and its initial log row are committed."""

    application_id: int
    user_id: int
    opportunity_id: int

    def payload(self) -> dict[str, Any]:
        return {
            "application_id": self.application_id,
            "opportunity_id": self.opportunity_id,
        }

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApplicationSubmittedEvent:
        return cls(**data)


@dataclass
class TransitionResult:
    """Outcome of a committed transition."""

    application: Application
    event: StatusChangedEvent
    log_entry: ApplicationStatusLog
    status: str = "committed"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "application_id": self.application.pk,
            "new_state": self.event.new_status,
            "event_payload": self.event.payload(),
        }


@dataclass
class SweepResult:
    """Result of one stale-application sweep."""

    total_found: int = 0
    processed: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
