"""
Application services.

Business logic around the workflow engine: submission, cancellation,
authorized status updates and read helpers. Notifications are scheduled on
transaction commit so nothing is delivered for work that rolled back.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from django.conf import settings
from django.db import transaction
from django.db.models import Count

from apps.applications.dtos import (
    ApplicationSubmittedEvent,
    StatusChangedEvent,
    TransitionResult,
)
from apps.applications.exceptions import BusinessRuleViolation, UnauthorizedAction
from apps.applications.models import (
    ActorKind,
    Application,
    ApplicationStatus,
    ApplicationStatusLog,
    Opportunity,
)
from apps.applications.policies import ApplicationPolicy, actor_kind_for
from apps.applications.workflow import StatusTransitionEngine
from apps.notify.tasks import send_application_confirmation, send_status_update_notification

logger = logging.getLogger(__name__)


def feature_enabled(name: str) -> bool:
    return bool(getattr(settings, "FEATURES", {}).get(name, True))


def schedule_status_notification(event: StatusChangedEvent) -> None:
    """Queue the status-change notification once the current transaction commits."""
    if not feature_enabled("email_notifications_enabled"):
        return
    payload = event.to_dict()
    transaction.on_commit(lambda: send_status_update_notification.delay(payload))


def schedule_submission_notification(event: ApplicationSubmittedEvent) -> None:
    if not feature_enabled("email_notifications_enabled"):
        return
    payload = event.to_dict()
    transaction.on_commit(lambda: send_application_confirmation.delay(payload))


class ApplicationService:
    """
    Entry point for everything that creates applications or moves their status.

    Usage:
        service = ApplicationService()
        application = service.submit_application(student, opportunity, match_score=72.5)
        service.update_status(application, ApplicationStatus.UNDER_REVIEW, admin_user)
    """

    def __init__(self, engine: StatusTransitionEngine | None = None):
        self.engine = engine or StatusTransitionEngine()

    def submit_application(
        self,
        user,
        opportunity: Opportunity,
        match_score: Decimal | float | None = None,
    ) -> Application:
        """Create a pending application and its initial audit row."""
        if not feature_enabled("applications_enabled"):
            raise BusinessRuleViolation("Application submissions are currently disabled.")

        if not ApplicationPolicy.can_apply(user):
            raise UnauthorizedAction("apply to internships", "as non-student")

        if not opportunity.is_active:
            raise BusinessRuleViolation("This internship is no longer accepting applications.")

        if self.has_applied(user.pk, opportunity.pk):
            raise BusinessRuleViolation("You have already applied to this internship.")

        with transaction.atomic():
            application = Application.objects.create(
                user=user,
                opportunity=opportunity,
                status=ApplicationStatus.PENDING,
                match_score=match_score,
            )
            ApplicationStatusLog.objects.create(
                application=application,
                from_status=None,
                to_status=ApplicationStatus.PENDING,
                actor_id=user.pk,
                actor_kind=ActorKind.STUDENT,
                note="Application submitted",
            )
            schedule_submission_notification(
                ApplicationSubmittedEvent(
                    application_id=application.pk,
                    user_id=user.pk,
                    opportunity_id=opportunity.pk,
                )
            )

        logger.info(
            "Application submitted",
            extra={
                "actor_id": user.pk,
                "actor_kind": ActorKind.STUDENT.value,
                "action": "application.submit",
                "application_id": application.pk,
                "opportunity_id": opportunity.pk,
                "match_score": str(match_score) if match_score is not None else None,
            },
        )
        return application

    def transition(
        self,
        application: Application | int,
        new_status: ApplicationStatus | str,
        actor_id: int,
        actor_kind: ActorKind | str,
        note: str = "",
    ) -> TransitionResult:
        """Run an already-authorized transition and schedule its notification."""
        try:
            with transaction.atomic():
                result = self.engine.request_transition(
                    application, new_status, actor_id, actor_kind, note
                )
                schedule_status_notification(result.event)
        except Exception as e:
            logger.warning(
                "Application status update rejected: %s",
                e,
                extra={
                    "actor_id": actor_id,
                    "actor_kind": str(actor_kind),
                    "action": "application.status_update",
                    "application_id": getattr(application, "pk", application),
                    "new_status": str(new_status),
                },
            )
            raise

        logger.info(
            "Application status updated",
            extra={
                "actor_id": actor_id,
                "actor_kind": result.event.actor_kind,
                "action": "application.status_update",
                "application_id": result.event.application_id,
                "old_status": result.event.old_status,
                "new_status": result.event.new_status,
                "note": note,
            },
        )
        return result

    def update_status(
        self,
        application: Application,
        new_status: ApplicationStatus | str,
        user,
        note: str = "",
    ) -> TransitionResult:
        """Status change requested by a signed-in user."""
        if not ApplicationPolicy.can_update_status(user, application):
            raise UnauthorizedAction("update application status", f"on application #{application.pk}")
        return self.transition(application, new_status, user.pk, actor_kind_for(user), note)

    def cancel_application(self, application: Application, user) -> None:
        """
        Withdraw a pending application.

        The cancellation is recorded as pending → rejected before the
        application row is deleted; the audit row outlives it.
        """
        if not ApplicationPolicy.can_cancel(user, application):
            raise UnauthorizedAction("cancel this application", "as non-owner")

        application_id = application.pk
        with transaction.atomic():
            current = Application.objects.select_for_update().get(pk=application_id)
            if current.status != ApplicationStatus.PENDING:
                raise BusinessRuleViolation("Cannot cancel an application that has been reviewed.")

            ApplicationStatusLog.objects.create(
                application_id=application_id,
                from_status=ApplicationStatus.PENDING,
                to_status=ApplicationStatus.REJECTED,
                actor_id=user.pk,
                actor_kind=ActorKind.STUDENT,
                note="Application cancelled by student",
            )
            current.delete()

        logger.info(
            "Application cancelled",
            extra={
                "actor_id": user.pk,
                "actor_kind": ActorKind.STUDENT.value,
                "action": "application.cancel",
                "application_id": application_id,
                "opportunity_id": application.opportunity_id,
            },
        )

    @staticmethod
    def has_applied(user_id: int, opportunity_id: int) -> bool:
        return Application.objects.filter(user_id=user_id, opportunity_id=opportunity_id).exists()

    @staticmethod
    def get_user_stats(user_id: int) -> dict[str, int]:
        counts = dict(
            Application.objects.filter(user_id=user_id)
            .values_list("status")
            .annotate(count=Count("id"))
            .values_list("status", "count")
        )
        stats: dict[str, Any] = {"total": sum(counts.values())}
        for status in ApplicationStatus:
            stats[status.value] = counts.get(status.value, 0)
        return stats

    @staticmethod
    def get_status_history(application: Application):
        return ApplicationStatusLog.objects.filter(application_id=application.pk).order_by(
            "created_at", "id"
        )
