"""Custom admin site for the internship portal's workflow console."""

import json
from datetime import timedelta

from django.contrib.admin import AdminSite
from django.db.models import Count
from django.utils import timezone
from django.utils.html import format_html


def prettify_json(value) -> str:
    """Render a JSON-compatible value as an indented <pre> block."""
    if value in (None, "", {}, []):
        return "-"
    return format_html(
        '<pre style="white-space: pre-wrap; margin: 0;">{}</pre>',
        json.dumps(value, indent=2, sort_keys=True, default=str),
    )


class PortalAdminSite(AdminSite):
    site_header = "Internship Portal"
    site_title = "Internship Portal"
    index_title = "Applications"
    index_template = "admin/portal_index.html"

    def index(self, request, extra_context=None):
        extra_context = extra_context or {}
        extra_context.update(self._get_dashboard_context())
        return super().index(request, extra_context=extra_context)

    def _get_dashboard_context(self):
        from django.conf import settings

        from apps.applications.models import Application, ApplicationStatus
        from apps.notify.models import NotificationLog, NotificationStatus

        now = timezone.now()
        stale_cutoff = now - timedelta(days=settings.APPLICATIONS_STALE_DAYS)

        # --- Applications per status ---
        counts = dict(
            Application.objects.values_list("status")
            .annotate(count=Count("id"))
            .values_list("status", "count")
        )
        status_breakdown = [
            {"status": status.value, "label": status.label, "count": counts.get(status.value, 0)}
            for status in ApplicationStatus
        ]

        # --- Stale queue ---
        stale_pending = Application.objects.filter(
            status=ApplicationStatus.PENDING, created_at__lt=stale_cutoff
        ).count()

        # --- Failed notifications (last 5) ---
        failed_notifications = list(
            NotificationLog.objects.filter(status=NotificationStatus.FAILED)
            .order_by("-created_at")
            .only("id", "event_kind", "recipient", "error", "created_at")[:5]
        )

        return {
            "status_breakdown": status_breakdown,
            "total_applications": sum(counts.values()),
            "stale_pending": stale_pending,
            "failed_notifications": failed_notifications,
        }
