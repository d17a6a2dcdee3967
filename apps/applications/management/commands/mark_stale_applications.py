"""
Management command to promote stale pending applications to review.

Usage:
    # Promote applications pending for longer than APPLICATIONS_STALE_DAYS
    python manage.py mark_stale_applications

    # Use a different threshold
    python manage.py mark_stale_applications --days 14

    # Show what would be promoted
    python manage.py mark_stale_applications --dry-run

    # Output as JSON
    python manage.py mark_stale_applications --json
"""

import json

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.applications.sweep import find_stale_applications, promote_stale_applications


class Command(BaseCommand):
    help = "Move pending applications older than the stale threshold to under_review"

    def add_arguments(self, parser):
        parser.add_argument(
            "--days",
            type=int,
            default=None,
            help=f"Stale threshold in days (default: {settings.APPLICATIONS_STALE_DAYS}).",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List stale applications without changing them.",
        )
        parser.add_argument(
            "--json",
            action="store_true",
            dest="json_output",
            help="Output result as JSON.",
        )

    def handle(self, *args, **options):
        days = options["days"]
        if days is None:
            days = settings.APPLICATIONS_STALE_DAYS
        if days < 0:
            raise CommandError("--days must be zero or positive")

        if options["dry_run"]:
            stale = list(find_stale_applications(days).values("id", "user_id", "created_at"))
            if options["json_output"]:
                self.stdout.write(json.dumps({"dry_run": True, "applications": stale}, default=str))
                return
            self.stdout.write(f"{len(stale)} application(s) pending for more than {days} days:")
            for row in stale:
                self.stdout.write(f"  #{row['id']} (user {row['user_id']}, created {row['created_at']})")
            return

        result = promote_stale_applications(stale_days=days)

        if options["json_output"]:
            self.stdout.write(json.dumps(result.to_dict()))
            return

        self.stdout.write(
            f"Found {result.total_found}, promoted {result.processed}, failed {result.failed}."
        )
        for error in result.errors:
            self.stdout.write(self.style.ERROR(f"  {error}"))
        if result.failed:
            self.stdout.write(self.style.WARNING("Sweep finished with failures."))
        else:
            self.stdout.write(self.style.SUCCESS("Sweep finished."))
