"""
PATH: users/models/user.py

SHOPPER + STAFF ACCOUNT

- email is the login identity (USERNAME_FIELD); username is a public handle
- role drives staff capabilities (permissions/roles.py); shoppers are "customer"
- phone + name prefill checkout when no saved address is chosen
- membership and wallet hang off the user in their own apps
"""

from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models

from permissions.roles import ROLE_ADMIN, ROLE_CUSTOMER, ROLE_MANAGER, ROLE_SUPPORT


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def _free_username(self, seed: str) -> str:
        seed = (seed or "shopper").strip().lower()
        taken = set(
            self.model.objects.filter(username__istartswith=seed).values_list("username", flat=True)
        )
        taken = {name.lower() for name in taken}
        if seed not in taken:
            return seed
        n = 2
        while f"{seed}{n}" in taken:
            n += 1
        return f"{seed}{n}"

    def create_user(self, email=None, password=None, **extra_fields):
        """
        Storefront sign-up accepts email, username, or both.

        - username only: email becomes <username>@local.test
        - email only: username is the email's local part, suffixed 2, 3... on clash
        - no password: the account gets an unusable one (staff-created shoppers)
        """
        username = (extra_fields.pop("username", "") or "").strip()
        email = (email or extra_fields.pop("email", "") or "").strip()

        if not (email or username):
            raise ValueError("Provide at least email or username")

        email = self.normalize_email(email or f"{username.lower()}@local.test")
        username = username or self._free_username(email.split("@")[0])

        extra_fields.setdefault("is_active", True)
        user = self.model(email=email, username=username, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        if not (email and password):
            raise ValueError("Superuser needs both email and password")

        extra_fields.update(role=ROLE_ADMIN, is_staff=True, is_superuser=True, is_active=True)
        return self.create_user(email=email, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_MANAGER, "Manager"),
        (ROLE_SUPPORT, "Support"),
        (ROLE_CUSTOMER, "Customer"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    username = models.CharField(max_length=150, unique=True)

    # Canonical identity
    email = models.EmailField(unique=True)

    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=40, blank=True, default="")

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CUSTOMER)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []  # keep createsuperuser simple; username is auto-derived

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.email:
            self.email = self.__class__.objects.normalize_email(self.email).strip()
        self.username = (self.username or "").strip()

        if not self.email and not self.username:
            raise ValidationError("User must have at least email or username")

    @property
    def full_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.username or self.email

    def __str__(self):
        ident = self.username or self.email
        return f"{ident} ({self.role})"
