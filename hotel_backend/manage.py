"""
PATH: manage.py

Django management entrypoint.

Key safeguard:
- If DJANGO_SETTINGS_MODULE is unset OR set to the settings *package*
  ("backend.settings"), force the concrete dev module ("backend.settings.dev").
  The package loads nothing on its own, so INSTALLED_APPS would be empty.

Production:
- Production must set DJANGO_SETTINGS_MODULE=backend.settings.prod explicitly.

Bootstrap hook:
- RUN_CREATE_SUPERUSER=True creates the first staff superuser (idempotent)
  from AUTO_ADMIN_USERNAME / AUTO_ADMIN_PASSWORD.
"""

from __future__ import annotations

import os
import sys


def _ensure_settings_module() -> None:
    current = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()

    if not current or current == "backend.settings":
        os.environ["DJANGO_SETTINGS_MODULE"] = "backend.settings.dev"


def _create_superuser_if_requested() -> None:
    if os.environ.get("RUN_CREATE_SUPERUSER") != "True":
        return

    import django
    django.setup()

    from django.contrib.auth import get_user_model

    User = get_user_model()

    username = os.environ.get("AUTO_ADMIN_USERNAME", "admin")
    password = os.environ.get("AUTO_ADMIN_PASSWORD")
    if not password:
        sys.stderr.write("RUN_CREATE_SUPERUSER set without AUTO_ADMIN_PASSWORD; skipped.\n")
        return

    if not User.objects.filter(username=username).exists():
        User.objects.create_superuser(username=username, email="", password=password)
        sys.stdout.write(f"Superuser '{username}' created.\n")
    else:
        sys.stdout.write(f"Superuser '{username}' already exists.\n")


def main() -> None:
    _ensure_settings_module()

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    _create_superuser_if_requested()

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
