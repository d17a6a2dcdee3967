"""Django app configuration for the applications app."""

from django.apps import AppConfig


class ApplicationsConfig(AppConfig):
    """Configuration for the Application Workflow app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.applications"
    verbose_name = "Application Workflow"
