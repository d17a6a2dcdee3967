"""
Management command to list available notification drivers and their requirements.

Usage:
    python manage.py list_notify_drivers
    python manage.py list_notify_drivers --verbose
"""

from django.conf import settings
from django.core.management.base import BaseCommand

from apps.notify.drivers import DRIVER_REGISTRY, is_notify_enabled

DRIVER_INFO = {
    "email": {
        "description": "Send notifications through the Django email backend",
        "required_config": [],
        "optional_config": ["from_address", "backend", "timeout"],
    },
    "log": {
        "description": "Write notifications to the apps.notify.mail logger",
        "required_config": [],
        "optional_config": ["level"],
    },
}


class Command(BaseCommand):
    help = "List available notification drivers and their configuration requirements"

    def add_arguments(self, parser):
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show detailed configuration requirements",
        )

    def handle(self, *args, **options):
        verbose = options.get("verbose", False)

        self.stdout.write(self.style.SUCCESS("Available Notification Drivers"))
        self.stdout.write("-" * 60)

        for name in DRIVER_REGISTRY:
            info = DRIVER_INFO.get(name, {})
            markers = []
            if name == settings.NOTIFY_DRIVER:
                markers.append("active")
            if not is_notify_enabled(name):
                markers.append("skipped")
            suffix = f" ({', '.join(markers)})" if markers else ""

            self.stdout.write(f"\n{self.style.WARNING(name)}{suffix}")
            self.stdout.write(f"  {info.get('description', '')}")

            if verbose:
                required = info.get("required_config") or []
                if required:
                    self.stdout.write("  Required config:")
                    for key in required:
                        self.stdout.write(f"    - {key}")
                else:
                    self.stdout.write("  Required config: none")

                optional = info.get("optional_config") or []
                if optional:
                    self.stdout.write("  Optional config:")
                    for key in optional:
                        self.stdout.write(f"    - {key}")

        self.stdout.write("\n" + "-" * 60)
        self.stdout.write("\nSelect a driver with NOTIFY_DRIVER and configure it with NOTIFY_CONFIG (JSON).")
