from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings

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
    Opportunity,
)
from apps.applications.services import ApplicationService

ALL_FEATURES = {
    "applications_enabled": True,
    "timeline_predictions_enabled": True,
    "email_notifications_enabled": True,
}


class ApplicationServiceTestCase(TestCase):
    def setUp(self):
        User = get_user_model()
        self.student = User.objects.create_user(
            username="student", email="student@example.com", password="pass"
        )
        self.other_student = User.objects.create_user(
            username="other", email="other@example.com", password="pass"
        )
        self.admin = User.objects.create_user(
            username="admin", email="admin@example.com", password="pass", is_staff=True
        )
        self.opportunity = Opportunity.objects.create(title="Data Intern", organization="Globex")
        self.service = ApplicationService()


@override_settings(FEATURES=ALL_FEATURES)
class SubmitApplicationTests(ApplicationServiceTestCase):
    def test_submit_creates_pending_application_and_initial_log(self):
        application = self.service.submit_application(
            self.student, self.opportunity, match_score=Decimal("72.50")
        )

        self.assertEqual(application.status, ApplicationStatus.PENDING)
        self.assertEqual(application.match_score, Decimal("72.50"))
        entry = ApplicationStatusLog.objects.get(application_id=application.pk)
        self.assertIsNone(entry.from_status)
        self.assertEqual(entry.to_status, ApplicationStatus.PENDING)
        self.assertEqual(entry.actor_kind, ActorKind.STUDENT)
        self.assertEqual(entry.actor_id, self.student.pk)
        self.assertEqual(entry.note, "Application submitted")

    def test_submit_schedules_confirmation_after_commit(self):
        with patch("apps.applications.services.send_application_confirmation") as task:
            with self.captureOnCommitCallbacks(execute=True):
                application = self.service.submit_application(self.student, self.opportunity)

        task.delay.assert_called_once_with(
            {
                "application_id": application.pk,
                "user_id": self.student.pk,
                "opportunity_id": self.opportunity.pk,
            }
        )

    def test_duplicate_application_is_rejected(self):
        self.service.submit_application(self.student, self.opportunity)

        with self.assertRaises(BusinessRuleViolation) as ctx:
            self.service.submit_application(self.student, self.opportunity)

        self.assertEqual(ctx.exception.status_code, 422)
        self.assertEqual(Application.objects.count(), 1)

    def test_inactive_opportunity_is_rejected(self):
        self.opportunity.is_active = False
        self.opportunity.save()

        with self.assertRaises(BusinessRuleViolation):
            self.service.submit_application(self.student, self.opportunity)

    def test_staff_cannot_apply(self):
        with self.assertRaises(UnauthorizedAction):
            self.service.submit_application(self.admin, self.opportunity)

    @override_settings(FEATURES={**ALL_FEATURES, "applications_enabled": False})
    def test_feature_flag_disables_submissions(self):
        with self.assertRaises(BusinessRuleViolation):
            self.service.submit_application(self.student, self.opportunity)

    @override_settings(FEATURES={**ALL_FEATURES, "email_notifications_enabled": False})
    def test_no_confirmation_when_notifications_disabled(self):
        with patch("apps.applications.services.send_application_confirmation") as task:
            with self.captureOnCommitCallbacks(execute=True):
                self.service.submit_application(self.student, self.opportunity)

        task.delay.assert_not_called()


@override_settings(FEATURES=ALL_FEATURES)
class UpdateStatusTests(ApplicationServiceTestCase):
    def setUp(self):
        super().setUp()
        self.application = Application.objects.create(user=self.student, opportunity=self.opportunity)

    def test_admin_update_commits_and_schedules_notification(self):
        with patch("apps.applications.services.send_status_update_notification") as task:
            with self.captureOnCommitCallbacks(execute=True):
                result = self.service.update_status(
                    self.application, ApplicationStatus.UNDER_REVIEW, self.admin, "Looks good"
                )

        self.assertEqual(result.event.actor_kind, "admin")
        self.assertEqual(result.event.changed_by, self.admin.pk)
        task.delay.assert_called_once()
        payload = task.delay.call_args.args[0]
        self.assertEqual(payload["old_status"], "pending")
        self.assertEqual(payload["new_status"], "under_review")
        self.assertEqual(payload["note"], "Looks good")

    def test_student_cannot_update_status(self):
        with self.assertRaises(UnauthorizedAction):
            self.service.update_status(self.application, ApplicationStatus.UNDER_REVIEW, self.student)

        self.application.refresh_from_db()
        self.assertEqual(self.application.status, ApplicationStatus.PENDING)

    def test_invalid_transition_schedules_nothing(self):
        with patch("apps.applications.services.send_status_update_notification") as task:
            with self.captureOnCommitCallbacks(execute=True):
                with self.assertRaises(InvalidTransition):
                    self.service.update_status(
                        self.application, ApplicationStatus.APPROVED, self.admin
                    )

        task.delay.assert_not_called()
        self.assertFalse(ApplicationStatusLog.objects.exists())

    def test_system_transition_records_reserved_actor(self):
        result = self.service.transition(
            self.application, ApplicationStatus.REJECTED, 0, ActorKind.SYSTEM, "closed"
        )

        self.assertEqual(result.log_entry.actor_id, 0)
        self.assertEqual(result.log_entry.actor_kind, ActorKind.SYSTEM)


@override_settings(FEATURES=ALL_FEATURES)
class CancelApplicationTests(ApplicationServiceTestCase):
    def setUp(self):
        super().setUp()
        self.application = self.service.submit_application(self.student, self.opportunity)

    def test_owner_cancels_pending_application(self):
        application_id = self.application.pk

        self.service.cancel_application(self.application, self.student)

        self.assertFalse(Application.objects.filter(pk=application_id).exists())
        rows = list(
            ApplicationStatusLog.objects.filter(application_id=application_id).values_list(
                "from_status", "to_status", "note"
            )
        )
        self.assertEqual(
            rows,
            [
                (None, "pending", "Application submitted"),
                ("pending", "rejected", "Application cancelled by student"),
            ],
        )

    def test_non_owner_cannot_cancel(self):
        with self.assertRaises(UnauthorizedAction):
            self.service.cancel_application(self.application, self.other_student)

        self.assertTrue(Application.objects.filter(pk=self.application.pk).exists())

    def test_reviewed_application_cannot_be_cancelled(self):
        self.service.transition(self.application, ApplicationStatus.UNDER_REVIEW, 1, "admin")

        with self.assertRaises(BusinessRuleViolation):
            self.service.cancel_application(self.application, self.student)

        self.assertTrue(Application.objects.filter(pk=self.application.pk).exists())


@override_settings(FEATURES=ALL_FEATURES)
class ReadHelperTests(ApplicationServiceTestCase):
    def test_user_stats_counts_each_status(self):
        second = Opportunity.objects.create(title="QA Intern", organization="Initech")
        first_app = self.service.submit_application(self.student, self.opportunity)
        self.service.submit_application(self.student, second)
        self.service.transition(first_app, ApplicationStatus.REJECTED, self.admin.pk, "admin")

        stats = self.service.get_user_stats(self.student.pk)

        self.assertEqual(stats["total"], 2)
        self.assertEqual(stats["pending"], 1)
        self.assertEqual(stats["rejected"], 1)
        self.assertEqual(stats["approved"], 0)

    def test_has_applied(self):
        self.assertFalse(self.service.has_applied(self.student.pk, self.opportunity.pk))
        self.service.submit_application(self.student, self.opportunity)
        self.assertTrue(self.service.has_applied(self.student.pk, self.opportunity.pk))

    def test_status_history_in_order(self):
        application = self.service.submit_application(self.student, self.opportunity)
        self.service.transition(application, ApplicationStatus.UNDER_REVIEW, self.admin.pk, "admin")
        self.service.transition(application, ApplicationStatus.SHORTLISTED, self.admin.pk, "admin")

        history = [entry.to_status for entry in self.service.get_status_history(application)]

        self.assertEqual(history, ["pending", "under_review", "shortlisted"])
