#!/usr/bin/env python
"""
PATH: manage.py

Storefront management entrypoint.

- DJANGO_SETTINGS_MODULE unset, or pointing at the settings package itself,
  falls back to backend.settings.dev. Production sets backend.settings.prod.
- RUN_CREATE_SUPERUSER=True + AUTO_ADMIN_EMAIL + AUTO_ADMIN_PASSWORD creates
  the first admin account once, before the requested command runs.
"""

from __future__ import annotations

import os
import sys

DEFAULT_SETTINGS = "backend.settings.dev"


def _settings_module() -> str:
    current = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()
    if current in ("", "backend.settings"):
        return DEFAULT_SETTINGS
    return current


def _bootstrap_admin() -> None:
    if os.environ.get("RUN_CREATE_SUPERUSER") != "True":
        return

    email = (os.environ.get("AUTO_ADMIN_EMAIL") or "").strip()
    password = os.environ.get("AUTO_ADMIN_PASSWORD") or ""
    if not (email and password):
        print("RUN_CREATE_SUPERUSER ignored: AUTO_ADMIN_EMAIL / AUTO_ADMIN_PASSWORD missing.")
        return

    import django

    django.setup()

    from django.contrib.auth import get_user_model

    User = get_user_model()
    if User.objects.filter(email__iexact=email).exists():
        print(f"Admin {email} already exists.")
        return

    User.objects.create_superuser(email=email, password=password)
    print(f"Admin {email} created.")


def main() -> None:
    os.environ["DJANGO_SETTINGS_MODULE"] = _settings_module()

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    _bootstrap_admin()
    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
