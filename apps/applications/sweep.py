"""Stale application sweep.

Pending applications nobody has looked at for ``stale_days`` are moved to
under_review by the reserved system actor. Each application is handled on its
own: one failure is logged and counted, the rest of the batch continues.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from django.conf import settings
from django.utils import timezone

from apps.applications.dtos import SweepResult
from apps.applications.models import ActorKind, Application, ApplicationStatus
from apps.applications.services import ApplicationService

logger = logging.getLogger(__name__)


def find_stale_applications(stale_days: int, now: datetime | None = None):
    cutoff = (now or timezone.now()) - timedelta(days=stale_days)
    return Application.objects.filter(
        status=ApplicationStatus.PENDING, created_at__lt=cutoff
    ).order_by("created_at")


def promote_stale_applications(
    stale_days: int | None = None,
    now: datetime | None = None,
    actor_id: int | None = None,
    service: ApplicationService | None = None,
) -> SweepResult:
    """Promote every stale pending application to under_review."""
    if stale_days is None:
        stale_days = settings.APPLICATIONS_STALE_DAYS
    if actor_id is None:
        actor_id = settings.WORKFLOW_SYSTEM_ACTOR_ID
    service = service or ApplicationService()

    result = SweepResult()
    note = f"Auto-promoted to review after {stale_days} days"

    for application_id in find_stale_applications(stale_days, now).values_list("id", flat=True):
        result.total_found += 1
        try:
            service.transition(
                application_id,
                ApplicationStatus.UNDER_REVIEW,
                actor_id,
                ActorKind.SYSTEM,
                note,
            )
            result.processed += 1
        except Exception as e:
            result.failed += 1
            result.errors.append(f"Application {application_id}: {e}")
            logger.exception(
                "Failed to promote stale application",
                extra={"application_id": application_id},
            )

    logger.info(
        "Stale applications sweep completed",
        extra={
            "total_found": result.total_found,
            "processed": result.processed,
            "failed": result.failed,
            "stale_days": stale_days,
        },
    )
    return result
