"""Celery tasks for the application workflow.

mark_stale_applications is scheduled daily through CELERY_BEAT_SCHEDULE
(see config/settings.py).
"""

from __future__ import annotations

from typing import Any

from celery import shared_task


@shared_task(bind=True, autoretry_for=(Exception,), retry_backoff=True, max_retries=3)
def mark_stale_applications(self, stale_days: int | None = None) -> dict[str, Any]:
    """Promote stale pending applications and return the sweep counters.

    Per-application failures are counted inside the sweep; a retry only
    happens when the sweep itself cannot run (e.g. database unavailable).
    """
    from apps.applications.sweep import promote_stale_applications

    return promote_stale_applications(stale_days=stale_days).to_dict()
