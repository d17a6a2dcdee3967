import pytest

from apps.applications.models import Application, ApplicationStatus, ApplicationStatusLog


@pytest.mark.django_db
class TestAdminPages:
    def test_application_list_loads(self, admin_client, make_application):
        make_application()
        response = admin_client.get("/admin/applications/application/")
        assert response.status_code == 200

    def test_status_log_list_loads(self, admin_client):
        response = admin_client.get("/admin/applications/applicationstatuslog/")
        assert response.status_code == 200

    def test_add_view_is_refused(self, admin_client, student, opportunity):
        assert admin_client.get("/admin/applications/application/add/").status_code == 403

        response = admin_client.post(
            "/admin/applications/application/add/",
            {"user": student.pk, "opportunity": opportunity.pk},
        )

        assert response.status_code == 403
        assert not Application.objects.exists()
        assert not ApplicationStatusLog.objects.exists()

    def test_index_shows_dashboard(self, admin_client, make_application):
        make_application()
        make_application(status=ApplicationStatus.APPROVED)

        response = admin_client.get("/admin/")

        assert response.status_code == 200
        assert response.context["total_applications"] == 2
        breakdown = {row["status"]: row["count"] for row in response.context["status_breakdown"]}
        assert breakdown["pending"] == 1
        assert breakdown["approved"] == 1


@pytest.mark.django_db
class TestTransitionActions:
    def test_change_view_only_offers_allowed_transitions(self, admin_client, make_application):
        application = make_application(status=ApplicationStatus.UNDER_REVIEW)

        response = admin_client.get(f"/admin/applications/application/{application.pk}/change/")

        assert response.status_code == 200
        tools = [tool["name"] for tool in response.context["objectactions"]]
        assert tools == ["shortlist", "reject"]

    def test_object_action_moves_status(self, admin_client, admin_user, make_application):
        application = make_application()

        response = admin_client.get(
            f"/admin/applications/application/{application.pk}/actions/move_to_review/"
        )

        assert response.status_code == 302
        application.refresh_from_db()
        assert application.status == ApplicationStatus.UNDER_REVIEW
        entry = ApplicationStatusLog.objects.get(application_id=application.pk)
        assert entry.actor_id == admin_user.pk
        assert entry.actor_kind == "admin"

    def test_invalid_object_action_leaves_status(self, admin_client, make_application):
        application = make_application(status=ApplicationStatus.APPROVED)

        response = admin_client.get(
            f"/admin/applications/application/{application.pk}/actions/reject/"
        )

        assert response.status_code == 302
        application.refresh_from_db()
        assert application.status == ApplicationStatus.APPROVED
        assert not ApplicationStatusLog.objects.filter(application_id=application.pk).exists()

    def test_bulk_move_selected_to_review(self, admin_client, make_application):
        pending = make_application()
        shortlisted = make_application(status=ApplicationStatus.SHORTLISTED)

        response = admin_client.post(
            "/admin/applications/application/",
            {"action": "move_selected_to_review", "_selected_action": [pending.pk, shortlisted.pk]},
        )

        assert response.status_code == 302
        assert Application.objects.get(pk=pending.pk).status == ApplicationStatus.UNDER_REVIEW
        assert Application.objects.get(pk=shortlisted.pk).status == ApplicationStatus.SHORTLISTED
