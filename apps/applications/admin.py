"""Admin configuration for application workflow models."""

from django.contrib import admin
from django.utils.html import format_html
from django_object_actions import DjangoObjectActions
from django_object_actions import action as object_action

from apps.applications.exceptions import WorkflowError
from apps.applications.models import (
    Application,
    ApplicationStatus,
    ApplicationStatusLog,
    Opportunity,
)
from apps.applications.services import ApplicationService

COLOR_HEX = {
    "yellow": "#ffc107",
    "blue": "#17a2b8",
    "purple": "#6f42c1",
    "indigo": "#6610f2",
    "green": "#28a745",
    "red": "#dc3545",
}

# change action name -> target status
TRANSITION_ACTIONS = {
    "move_to_review": ApplicationStatus.UNDER_REVIEW,
    "shortlist": ApplicationStatus.SHORTLISTED,
    "schedule_interview": ApplicationStatus.INTERVIEW_SCHEDULED,
    "approve": ApplicationStatus.APPROVED,
    "reject": ApplicationStatus.REJECTED,
}


def status_badge_html(status: str):
    color = COLOR_HEX.get(ApplicationStatus(status).color_tag, "#6c757d")
    return format_html(
        '<span style="background-color: {}; color: white; padding: 3px 8px; '
        'border-radius: 3px; font-size: 11px;">{}</span>',
        color,
        ApplicationStatus(status).label.upper(),
    )


class ApplicationStatusLogInline(admin.TabularInline):
    """Inline display of the audit trail."""

    model = ApplicationStatusLog
    extra = 0
    readonly_fields = ["from_status", "to_status", "actor_id", "actor_kind", "note", "created_at"]
    fields = readonly_fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Opportunity)
class OpportunityAdmin(admin.ModelAdmin):
    list_display = ["title", "organization", "is_active", "created_at"]
    list_filter = ["is_active"]
    search_fields = ["title", "organization"]


@admin.register(Application)
class ApplicationAdmin(DjangoObjectActions, admin.ModelAdmin):
    """Admin for Application; status only moves through the workflow actions."""

    list_display = ["id", "user", "opportunity", "status_badge", "match_score", "created_at"]
    list_filter = ["status"]
    search_fields = ["user__username", "user__email", "opportunity__title"]
    readonly_fields = ["status", "created_at", "updated_at"]
    date_hierarchy = "created_at"
    inlines = [ApplicationStatusLogInline]
    actions = ["move_selected_to_review"]
    change_actions = list(TRANSITION_ACTIONS)

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("user", "opportunity")

    def has_add_permission(self, request):
        # Applications are created by ApplicationService.submit_application only.
        return False

    def get_change_actions(self, request, object_id, form_url):
        actions = super().get_change_actions(request, object_id, form_url)
        obj = self.get_object(request, object_id)
        if obj is None:
            return []
        allowed = set(obj.allowed_transitions())
        return [name for name in actions if TRANSITION_ACTIONS.get(name) in allowed]

    def _transition(self, request, obj, target: ApplicationStatus):
        try:
            ApplicationService().update_status(obj, target, request.user)
        except WorkflowError as e:
            self.message_user(request, str(e), level="warning")
        else:
            self.message_user(request, f"Application #{obj.pk} moved to {target.label}.")

    @object_action(label="Move to review", description="Start reviewing this application")
    def move_to_review(self, request, obj):
        self._transition(request, obj, ApplicationStatus.UNDER_REVIEW)

    @object_action(label="Shortlist", description="Shortlist this application")
    def shortlist(self, request, obj):
        self._transition(request, obj, ApplicationStatus.SHORTLISTED)

    @object_action(label="Schedule interview", description="Mark the interview as scheduled")
    def schedule_interview(self, request, obj):
        self._transition(request, obj, ApplicationStatus.INTERVIEW_SCHEDULED)

    @object_action(label="Approve", description="Approve this application")
    def approve(self, request, obj):
        self._transition(request, obj, ApplicationStatus.APPROVED)

    @object_action(label="Reject", description="Reject this application")
    def reject(self, request, obj):
        self._transition(request, obj, ApplicationStatus.REJECTED)

    @admin.action(description="Move selected pending applications to review")
    def move_selected_to_review(self, request, queryset):
        service = ApplicationService()
        moved = 0
        for application in queryset.filter(status=ApplicationStatus.PENDING):
            try:
                service.update_status(application, ApplicationStatus.UNDER_REVIEW, request.user)
                moved += 1
            except WorkflowError as e:
                self.message_user(request, f"#{application.pk}: {e}", level="warning")
        self.message_user(request, f"{moved} application(s) moved to review.")

    @admin.display(description="Status")
    def status_badge(self, obj):
        return status_badge_html(obj.status)


@admin.register(ApplicationStatusLog)
class ApplicationStatusLogAdmin(admin.ModelAdmin):
    """Read-only admin for the audit trail."""

    list_display = ["application_id", "from_status", "to_status", "actor_kind", "actor_id", "created_at"]
    list_filter = ["actor_kind", "to_status"]
    search_fields = ["note"]
    readonly_fields = [
        "application_id",
        "from_status",
        "to_status",
        "actor_id",
        "actor_kind",
        "note",
        "created_at",
    ]
    exclude = ["application"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
