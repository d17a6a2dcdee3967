"""Authorization rules for application actions.

Staff users act as portal admins; every other active user is a student.
"""

from __future__ import annotations

from apps.applications.models import ActorKind, Application


def actor_kind_for(user) -> ActorKind:
    return ActorKind.ADMIN if user.is_staff else ActorKind.STUDENT


class ApplicationPolicy:
    """Answers "may this user do X to this application"."""

    @staticmethod
    def can_apply(user) -> bool:
        return user.is_authenticated and user.is_active and not user.is_staff

    @staticmethod
    def can_view(user, application: Application) -> bool:
        return user.is_staff or application.user_id == user.pk

    @staticmethod
    def can_update_status(user, application: Application) -> bool:
        return user.is_active and user.is_staff

    @staticmethod
    def can_cancel(user, application: Application) -> bool:
        # Only the owner; whether the status still allows it is a business rule.
        return application.user_id == user.pk
