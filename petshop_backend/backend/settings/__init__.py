# backend/settings/__init__.py
"""
Storefront settings live in base.py; dev.py and prod.py layer on top of it.

Nothing is imported here. Pick the layer with DJANGO_SETTINGS_MODULE:
- backend.settings.dev   (local runs + the test suite)
- backend.settings.prod  (Postgres, Sentry, secure cookies)
"""
