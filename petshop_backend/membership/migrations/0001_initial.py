"""
MIGRATION: membership initial schema (Membership)
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Membership",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "tier",
                    models.CharField(
                        choices=[
                            ("silver_paw", "Silver Paw"),
                            ("golden_paw", "Golden Paw"),
                            ("diamond_paw", "Diamond Paw"),
                        ],
                        max_length=20,
                    ),
                ),
                ("start_date", models.DateTimeField()),
                ("expiry_date", models.DateTimeField()),
                ("auto_renew", models.BooleanField(default=False)),
                ("total_saved", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("exclusive_products_purchased", models.PositiveIntegerField(default=0)),
                ("last_renew_date", models.DateTimeField(blank=True, null=True)),
                ("last_expiry_notice_for", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="membership",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["expiry_date"], name="membership_expiry_idx"),
                ],
            },
        ),
    ]
