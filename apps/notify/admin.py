"""Admin configuration for notify models."""

from django.contrib import admin
from django.db import models as db_models
from django.utils.html import format_html
from django_json_widget.widgets import JSONEditorWidget

from apps.notify.models import NotificationLog, NotificationStatus
from config.admin import prettify_json


@admin.register(NotificationLog)
class NotificationLogAdmin(admin.ModelAdmin):
    """Read-only admin for the notification log."""

    list_display = [
        "event_kind",
        "recipient",
        "status_badge",
        "subject",
        "created_at",
    ]
    formfield_overrides = {db_models.JSONField: {"widget": JSONEditorWidget}}
    list_filter = ["status", "event_kind"]
    search_fields = ["recipient", "subject", "fingerprint"]
    date_hierarchy = "created_at"
    readonly_fields = [
        "user",
        "event_kind",
        "fingerprint",
        "status",
        "subject",
        "recipient",
        "body",
        "error",
        "pretty_payload",
        "created_at",
        "updated_at",
    ]

    fieldsets = [
        (
            None,
            {
                "fields": ["user", "event_kind", "status", "error"],
            },
        ),
        (
            "Message",
            {
                "fields": ["recipient", "subject", "body"],
            },
        ),
        (
            "Idempotency",
            {
                "fields": ["fingerprint", "pretty_payload"],
                "classes": ["collapse"],
            },
        ),
        (
            "Timestamps",
            {
                "fields": ["created_at", "updated_at"],
                "classes": ["collapse"],
            },
        ),
    ]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("user")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description="Status")
    def status_badge(self, obj):
        colors = {
            NotificationStatus.PENDING: "#6c757d",
            NotificationStatus.SENT: "#28a745",
            NotificationStatus.FAILED: "#dc3545",
        }
        color = colors.get(obj.status, "#6c757d")
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            color,
            obj.status.upper(),
        )

    @admin.display(description="Payload")
    def pretty_payload(self, obj):
        return prettify_json(obj.payload)
