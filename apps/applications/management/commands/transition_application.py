"""
Management command to move one application through the workflow.

Runs as the reserved system actor unless --actor-id is given.

Usage:
    python manage.py transition_application 42 under_review
    python manage.py transition_application 42 rejected --note "Position filled"
    python manage.py transition_application 42 --allowed
"""

import json

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.applications.exceptions import WorkflowError
from apps.applications.models import ActorKind, Application, ApplicationStatus
from apps.applications.services import ApplicationService


class Command(BaseCommand):
    help = "Request a status transition for an application"

    def add_arguments(self, parser):
        parser.add_argument("application_id", type=int)
        parser.add_argument(
            "status",
            nargs="?",
            choices=[status.value for status in ApplicationStatus],
            help="Target status.",
        )
        parser.add_argument("--note", default="", help="Note stored on the audit row.")
        parser.add_argument(
            "--actor-id",
            type=int,
            default=None,
            help="Actor id to record (default: the system actor).",
        )
        parser.add_argument(
            "--actor-kind",
            choices=[kind.value for kind in ActorKind],
            default=None,
            help="Actor kind to record (default: system, or admin with --actor-id).",
        )
        parser.add_argument(
            "--allowed",
            action="store_true",
            help="Only print the transitions allowed from the current status.",
        )

    def handle(self, *args, **options):
        application_id = options["application_id"]
        application = Application.objects.filter(pk=application_id).first()
        if application is None:
            raise CommandError(f"Application {application_id} does not exist.")

        if options["allowed"] or not options["status"]:
            allowed = [status.value for status in application.allowed_transitions()]
            self.stdout.write(
                json.dumps({"current_status": application.status, "allowed_transitions": allowed})
            )
            return

        actor_id = options["actor_id"]
        actor_kind = options["actor_kind"]
        if actor_id is None:
            actor_id = settings.WORKFLOW_SYSTEM_ACTOR_ID
            actor_kind = actor_kind or ActorKind.SYSTEM
        else:
            actor_kind = actor_kind or ActorKind.ADMIN

        try:
            result = ApplicationService().transition(
                application, options["status"], actor_id, actor_kind, options["note"]
            )
        except WorkflowError as e:
            raise CommandError(json.dumps(e.to_dict())) from e

        self.stdout.write(self.style.SUCCESS(json.dumps(result.to_dict())))
