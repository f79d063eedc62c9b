"""
MIGRATION: wallet initial schema (Wallet, WalletTransaction, DailyCheckIn, UserTask, GameRecord)
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Wallet",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("frozen_balance", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("total_earned", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("total_spent", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="wallet",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="WalletTransaction",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("EARN", "Earn"),
                            ("SPEND", "Spend"),
                            ("REFUND", "Refund"),
                            ("FREEZE", "Freeze"),
                            ("UNFREEZE", "Unfreeze"),
                        ],
                        max_length=10,
                    ),
                ),
                ("source", models.CharField(max_length=50)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("balance_before", models.DecimalField(decimal_places=2, max_digits=12)),
                ("balance_after", models.DecimalField(decimal_places=2, max_digits=12)),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("reference", models.CharField(blank=True, db_index=True, default="", max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "wallet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transactions",
                        to="wallet.wallet",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="wallet_transactions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user", "created_at"], name="wallet_txn_user_crt_idx"),
                    models.Index(fields=["type", "source"], name="wallet_txn_type_src_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="DailyCheckIn",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("date", models.DateField()),
                ("consecutive_days", models.PositiveIntegerField(default=1)),
                ("reward", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="check_ins",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-date"],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "date"), name="uniq_checkin_per_user_day"),
                ],
            },
        ),
        migrations.CreateModel(
            name="UserTask",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "task_type",
                    models.CharField(
                        choices=[
                            ("REVIEW_ORDER", "Review an order"),
                            ("PHOTO_REVIEW", "Photo review"),
                            ("SHARE_PRODUCT", "Share a product"),
                            ("REFER_FRIEND", "Refer a friend"),
                        ],
                        max_length=30,
                    ),
                ),
                ("reward", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("completed_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reward_tasks",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-completed_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "task_type"), name="uniq_task_per_user"),
                ],
            },
        ),
        migrations.CreateModel(
            name="GameRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "game_type",
                    models.CharField(
                        choices=[
                            ("FEED_PET", "Feed the pet"),
                            ("MATCH_THREE", "Match three"),
                            ("LUCKY_WHEEL", "Lucky wheel"),
                            ("QUIZ", "Pet quiz"),
                        ],
                        max_length=20,
                    ),
                ),
                ("score", models.IntegerField(default=0)),
                ("reward", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("played_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="game_records",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-played_at"],
                "indexes": [
                    models.Index(fields=["user", "played_at"], name="wallet_game_user_played_idx"),
                    models.Index(fields=["game_type"], name="wallet_game_type_idx"),
                ],
            },
        ),
    ]
