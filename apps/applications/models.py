"""
Application workflow models.

ApplicationStatus carries the lifecycle state machine; Application is the
root entity; ApplicationStatusLog is its append-only audit trail.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models


class ApplicationStatus(models.TextChoices):
    """Lifecycle states of an application (state machine)."""

    PENDING = "pending", "Pending"
    UNDER_REVIEW = "under_review", "Under Review"
    SHORTLISTED = "shortlisted", "Shortlisted"
    INTERVIEW_SCHEDULED = "interview_scheduled", "Interview Scheduled"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"

    @classmethod
    def coerce(cls, value: ApplicationStatus | str) -> ApplicationStatus:
        """Return the member for ``value``; raises ValueError for unknown values."""
        if isinstance(value, cls):
            return value
        return cls(value)

    def allowed_transitions(self) -> tuple[ApplicationStatus, ...]:
        return TRANSITIONS[self]

    def can_transition_to(self, target: ApplicationStatus) -> bool:
        return target in TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[self]

    @property
    def color_tag(self) -> str:
        return STATUS_COLORS[self]


# Allowed successors per state, in display order.
TRANSITIONS: dict[ApplicationStatus, tuple[ApplicationStatus, ...]] = {
    ApplicationStatus.PENDING: (ApplicationStatus.UNDER_REVIEW, ApplicationStatus.REJECTED),
    ApplicationStatus.UNDER_REVIEW: (ApplicationStatus.SHORTLISTED, ApplicationStatus.REJECTED),
    ApplicationStatus.SHORTLISTED: (
        ApplicationStatus.INTERVIEW_SCHEDULED,
        ApplicationStatus.REJECTED,
    ),
    ApplicationStatus.INTERVIEW_SCHEDULED: (ApplicationStatus.APPROVED, ApplicationStatus.REJECTED),
    ApplicationStatus.APPROVED: (),
    ApplicationStatus.REJECTED: (),
}

STATUS_COLORS: dict[ApplicationStatus, str] = {
    ApplicationStatus.PENDING: "yellow",
    ApplicationStatus.UNDER_REVIEW: "blue",
    ApplicationStatus.SHORTLISTED: "purple",
    ApplicationStatus.INTERVIEW_SCHEDULED: "indigo",
    ApplicationStatus.APPROVED: "green",
    ApplicationStatus.REJECTED: "red",
}


class ActorKind(models.TextChoices):
    """Who initiated a transition."""

    ADMIN = "admin", "Admin"
    STUDENT = "student", "Student"
    SYSTEM = "system", "System"


class Opportunity(models.Model):
    """An internship posting students can apply to."""

    title = models.CharField(max_length=255)
    organization = models.CharField(max_length=255)
    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Inactive opportunities no longer accept applications.",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name_plural = "Opportunities"

    def __str__(self):
        return f"{self.title} @ {self.organization}"


class Application(models.Model):
    """
    One student's application to one opportunity.

    ``status`` is owned by StatusTransitionEngine; other code must not assign it.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="applications",
    )
    opportunity = models.ForeignKey(
        Opportunity,
        on_delete=models.CASCADE,
        related_name="applications",
    )
    status = models.CharField(
        max_length=32,
        choices=ApplicationStatus.choices,
        default=ApplicationStatus.PENDING,
        db_index=True,
    )
    match_score = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Profile/opportunity match score at submission time (0-100).",
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "opportunity"],
                name="applications_one_per_opportunity",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "created_at"], name="application_status_1e0c4b_idx"),
        ]

    def __str__(self):
        return f"Application #{self.pk} [{self.status}]"

    @property
    def current_status(self) -> ApplicationStatus:
        return ApplicationStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.current_status.is_terminal

    def allowed_transitions(self) -> tuple[ApplicationStatus, ...]:
        return self.current_status.allowed_transitions()

    def can_transition_to(self, target: ApplicationStatus | str) -> bool:
        return self.current_status.can_transition_to(ApplicationStatus.coerce(target))


class AppendOnlyError(Exception):
    """Raised when code tries to modify or delete an audit row."""


class ApplicationStatusLog(models.Model):
    """
    Immutable audit record of one committed transition.

    ``from_status`` is empty only for the initial "created" entry. The
    application reference is kept without a database constraint so rows
    survive deletion of the application they describe.
    """

    application = models.ForeignKey(
        Application,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="status_logs",
    )
    from_status = models.CharField(
        max_length=32,
        choices=ApplicationStatus.choices,
        null=True,
        blank=True,
    )
    to_status = models.CharField(
        max_length=32,
        choices=ApplicationStatus.choices,
    )
    actor_id = models.BigIntegerField(
        db_index=True,
        help_text="User id of the actor, or the reserved system actor id.",
    )
    actor_kind = models.CharField(
        max_length=16,
        choices=ActorKind.choices,
    )
    note = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["application", "created_at"], name="application_applica_5d2f7a_idx"),
            models.Index(fields=["from_status", "to_status"], name="application_from_st_9b3e21_idx"),
        ]

    def __str__(self):
        return f"#{self.application_id}: {self.from_status or '-'} → {self.to_status}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise AppendOnlyError("Status log entries cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AppendOnlyError("Status log entries cannot be deleted.")
