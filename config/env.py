"""Dotenv loading for local runs of the portal.

Files are read from the project root, existing process variables always win:
- .env
- .env.dev, only when PORTAL_ENV (or DJANGO_ENV) names a development environment

Production deployments should set real environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

DEV_ENV_NAMES = {"dev", "development", "local"}


def _is_dev_environment() -> bool:
    env_name = os.environ.get("PORTAL_ENV") or os.environ.get("DJANGO_ENV", "")
    return env_name.lower() in DEV_ENV_NAMES


def load_env(base_dir: Path | None = None) -> None:
    """Populate os.environ from the project's dotenv files.

    Idempotent; settings.py and celery.py both call it.
    """
    root = base_dir or Path(__file__).resolve().parent.parent

    load_dotenv(root / ".env", override=False)
    if _is_dev_environment():
        load_dotenv(root / ".env.dev", override=False)
