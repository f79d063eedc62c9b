# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL STOREFRONT SETTINGS (also used by the test suite)

- DEBUG on, sqlite from base.py unless DATABASE_URL says otherwise
- storefront dev servers (Vite + Next) allowed for CORS/CSRF
- membership notices go to the console / locmem outbox
- MD5 hashing keeps fixture users fast to create
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1", "testserver"])

_DEV_FRONTENDS = ["http://localhost:5173", "http://localhost:3000"]

CORS_ALLOWED_ORIGINS = env.list("CORS_ALLOWED_ORIGINS", default=_DEV_FRONTENDS)
CSRF_TRUSTED_ORIGINS = env.list("CSRF_TRUSTED_ORIGINS", default=_DEV_FRONTENDS)

EMAIL_BACKEND = env("EMAIL_BACKEND", default="django.core.mail.backends.console.EmailBackend")

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# checkout + wallet flows are the noisy ones while developing
for _name in ("orders", "wallet"):
    LOGGING["loggers"][_name]["level"] = env("DEV_LOG_LEVEL", default="DEBUG")
