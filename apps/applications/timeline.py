"""
Application timeline and next-stage prediction.

The timeline is derived from the status log; predictions use the historical
average number of days each forward transition took, cached for ten minutes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from django.core.cache import cache
from django.utils import timezone

from apps.applications.models import Application, ApplicationStatus, ApplicationStatusLog
from apps.applications.services import feature_enabled

AVERAGES_CACHE_KEY = "applications:timeline_averages"
CACHE_TTL = 600

STAGES: dict[ApplicationStatus, dict[str, Any]] = {
    ApplicationStatus.PENDING: {"label": "Applied", "icon": "paper-plane", "order": 1},
    ApplicationStatus.UNDER_REVIEW: {"label": "Under Review", "icon": "search", "order": 2},
    ApplicationStatus.SHORTLISTED: {"label": "Shortlisted", "icon": "star", "order": 3},
    ApplicationStatus.INTERVIEW_SCHEDULED: {"label": "Interview", "icon": "video", "order": 4},
    ApplicationStatus.APPROVED: {"label": "Approved", "icon": "check-circle", "order": 5},
    ApplicationStatus.REJECTED: {"label": "Rejected", "icon": "times-circle", "order": 6},
}

# The happy path: the transition each non-terminal state usually takes next.
NEXT_EXPECTED: dict[ApplicationStatus, ApplicationStatus] = {
    ApplicationStatus.PENDING: ApplicationStatus.UNDER_REVIEW,
    ApplicationStatus.UNDER_REVIEW: ApplicationStatus.SHORTLISTED,
    ApplicationStatus.SHORTLISTED: ApplicationStatus.INTERVIEW_SCHEDULED,
    ApplicationStatus.INTERVIEW_SCHEDULED: ApplicationStatus.APPROVED,
}

DEFAULT_DAYS: dict[ApplicationStatus, float] = {
    ApplicationStatus.PENDING: 3,
    ApplicationStatus.UNDER_REVIEW: 5,
    ApplicationStatus.SHORTLISTED: 4,
    ApplicationStatus.INTERVIEW_SCHEDULED: 7,
}


class ApplicationTimelineService:
    """Builds the per-application progress view shown to students."""

    def get_application_timeline(
        self, application: Application, now: datetime | None = None
    ) -> dict[str, Any]:
        current = application.current_status
        completed: dict[str, datetime] = {}
        for entry in ApplicationStatusLog.objects.filter(application_id=application.pk).order_by(
            "created_at", "id"
        ):
            completed[entry.to_status] = entry.created_at

        stages = []
        for status, info in STAGES.items():
            if status == ApplicationStatus.REJECTED and current != ApplicationStatus.REJECTED:
                continue
            stages.append(
                {
                    "status": status.value,
                    "label": info["label"],
                    "icon": info["icon"],
                    "order": info["order"],
                    "completed": status.value in completed,
                    "current": status == current,
                    "completed_at": completed.get(status.value),
                }
            )

        return {
            "stages": stages,
            "current_status": current.value,
            "is_terminal": current.is_terminal,
            "prediction": self.get_prediction(application, now=now),
        }

    def get_prediction(
        self, application: Application, now: datetime | None = None
    ) -> dict[str, Any] | None:
        if not feature_enabled("timeline_predictions_enabled"):
            return None

        current = application.current_status
        next_status = NEXT_EXPECTED.get(current)
        if current.is_terminal or next_status is None:
            return None

        averages = self.get_historical_averages()
        avg_days = averages.get(current.value, DEFAULT_DAYS[current])
        days_waiting = ((now or timezone.now()) - application.updated_at).days

        if days_waiting < avg_days:
            remaining = round(avg_days - days_waiting)
            message = f"Typically moves to {next_status.label} in {remaining} more day(s)"
        else:
            message = f"Usually takes {round(avg_days, 1)} days. You've waited {days_waiting} days."

        return {
            "next_status": next_status.value,
            "next_label": next_status.label,
            "avg_days": round(avg_days, 1),
            "days_waiting": days_waiting,
            "message": message,
        }

    def get_historical_averages(self) -> dict[str, float]:
        return cache.get_or_set(AVERAGES_CACHE_KEY, self._compute_averages, CACHE_TTL)

    @staticmethod
    def _compute_averages() -> dict[str, float]:
        """Average days between entering a state and leaving it along the happy path."""
        entered: dict[tuple[int, str], datetime] = {}
        durations: dict[str, list[float]] = {status.value: [] for status in NEXT_EXPECTED}

        logs = ApplicationStatusLog.objects.order_by("application_id", "created_at", "id")
        for entry in logs.only("application_id", "from_status", "to_status", "created_at"):
            from_status = entry.from_status
            if from_status and NEXT_EXPECTED.get(ApplicationStatus(from_status)) == entry.to_status:
                started = entered.get((entry.application_id, from_status))
                if started is not None:
                    delta = entry.created_at - started
                    durations[from_status].append(delta.total_seconds() / 86400)
            entered[(entry.application_id, entry.to_status)] = entry.created_at

        averages = {}
        for status, samples in durations.items():
            if samples:
                averages[status] = sum(samples) / len(samples)
            else:
                averages[status] = float(DEFAULT_DAYS[ApplicationStatus(status)])
        return averages

    @staticmethod
    def clear_cache() -> None:
        cache.delete(AVERAGES_CACHE_KEY)
