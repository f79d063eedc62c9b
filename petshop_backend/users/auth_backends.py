"""
PATH: users/auth_backends.py

SHOPPER LOGIN BACKEND

One identifier field on the storefront login form:
- contains "@"  -> matched against email (case-insensitive)
- otherwise     -> matched against username (case-insensitive)

Passing email= AND username= together is ambiguous and never authenticates.
Inactive accounts are rejected through ModelBackend.user_can_authenticate.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend

User = get_user_model()


def _identifier_lookup(identifier: str) -> dict:
    if "@" in identifier:
        return {"email__iexact": identifier}
    return {"username__iexact": identifier}


class EmailOrUsernameBackend(ModelBackend):
    def authenticate(self, request, username=None, password=None, **kwargs):
        email = (kwargs.get("email") or "").strip()
        if email and username:
            return None

        identifier = (username or email or kwargs.get("identifier") or "").strip()
        if not identifier or password is None:
            return None

        user = User.objects.filter(**_identifier_lookup(identifier)).first()
        if user is None:
            # keep timing close to a real password check
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
