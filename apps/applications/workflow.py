"""
Application status state machine.

StatusTransitionEngine validates a requested transition against the fixed
transition table on ApplicationStatus and commits it together with its audit
row. It does not authorize (see apps.applications.policies) and does not
deliver notifications: the returned StatusChangedEvent is handed to
apps.notify by the caller.

Usage:
    engine = StatusTransitionEngine()
    result = engine.request_transition(app, ApplicationStatus.UNDER_REVIEW, user.id, "admin")
    result.event  # -> StatusChangedEvent
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from apps.applications.dtos import StatusChangedEvent, TransitionResult
from apps.applications.exceptions import (
    BusinessRuleViolation,
    InvalidTransition,
    UnauthorizedAction,
)
from apps.applications.models import (
    ActorKind,
    Application,
    ApplicationStatus,
    ApplicationStatusLog,
)

logger = logging.getLogger(__name__)


def allowed_transitions(status: ApplicationStatus | str) -> tuple[ApplicationStatus, ...]:
    return ApplicationStatus.coerce(status).allowed_transitions()


def is_terminal(status: ApplicationStatus | str) -> bool:
    return ApplicationStatus.coerce(status).is_terminal


def label(status: ApplicationStatus | str) -> str:
    return ApplicationStatus.coerce(status).label


def color_tag(status: ApplicationStatus | str) -> str:
    return ApplicationStatus.coerce(status).color_tag


class StatusTransitionEngine:
    """Commits legal status transitions and their audit trail."""

    def request_transition(
        self,
        application: Application | int,
        target_status: ApplicationStatus | str,
        actor_id: int | None,
        actor_kind: ActorKind | str,
        note: str = "",
    ) -> TransitionResult:
        """
        Move an application to ``target_status``.

        Args:
            application: Application instance or primary key.
            target_status: Requested status.
            actor_id: Id of the (already authorized) actor.
            actor_kind: admin, student or system.
            note: Free text stored on the audit row.

        Returns:
            TransitionResult with the refreshed application, the audit row and
            the StatusChangedEvent to dispatch.

        Raises:
            InvalidTransition: target is not allowed from the current status.
            BusinessRuleViolation: unknown status or missing application.
            UnauthorizedAction: no usable actor was supplied.
        """
        target = self._coerce_status(target_status)
        kind = self._validate_actor(actor_id, actor_kind)
        application_id = application.pk if isinstance(application, Application) else application

        with transaction.atomic():
            locked = self._lock(application_id)
            old_status = locked.current_status

            if not old_status.can_transition_to(target):
                raise InvalidTransition(old_status, target, old_status.allowed_transitions())

            now = timezone.now()
            # Compare-and-swap on the status we validated against.
            updated = Application.objects.filter(pk=application_id, status=old_status).update(
                status=target, updated_at=now
            )
            if updated != 1:
                winner = ApplicationStatus(
                    Application.objects.values_list("status", flat=True).get(pk=application_id)
                )
                logger.info(
                    "Lost transition race",
                    extra={
                        "application_id": application_id,
                        "expected_status": old_status.value,
                        "actual_status": winner.value,
                    },
                )
                raise InvalidTransition(winner, target, winner.allowed_transitions())

            log_entry = ApplicationStatusLog.objects.create(
                application_id=application_id,
                from_status=old_status,
                to_status=target,
                actor_id=actor_id,
                actor_kind=kind,
                note=note or "",
            )

        if isinstance(application, Application):
            application.status = target
            application.updated_at = now
            refreshed = application
        else:
            locked.status = target
            locked.updated_at = now
            refreshed = locked

        event = StatusChangedEvent(
            application_id=application_id,
            user_id=refreshed.user_id,
            opportunity_id=refreshed.opportunity_id,
            old_status=old_status.value,
            new_status=target.value,
            changed_by=actor_id,
            actor_kind=kind.value,
            note=log_entry.note,
            occurred_at=log_entry.created_at,
        )
        return TransitionResult(application=refreshed, event=event, log_entry=log_entry)

    def _lock(self, application_id: int | None) -> Application:
        """Load the application row under a row lock for the current transaction."""
        try:
            return Application.objects.select_for_update().get(pk=application_id)
        except Application.DoesNotExist:
            raise BusinessRuleViolation(f"Application {application_id} does not exist.") from None

    @staticmethod
    def _coerce_status(value: ApplicationStatus | str) -> ApplicationStatus:
        try:
            return ApplicationStatus.coerce(value)
        except ValueError:
            raise BusinessRuleViolation(f"Unknown application status: {value!r}") from None

    @staticmethod
    def _validate_actor(actor_id: int | None, actor_kind: ActorKind | str) -> ActorKind:
        if actor_id is None:
            raise UnauthorizedAction("change application status", "without an actor")
        try:
            return ActorKind(actor_kind)
        except ValueError:
            raise UnauthorizedAction(
                "change application status", f"as unknown actor kind {actor_kind!r}"
            ) from None
