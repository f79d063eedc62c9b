# wallet/models/activity.py

"""
REWARD ACTIVITY

- DailyCheckIn: one row per user per calendar day (streak counter)
- UserTask: one row per user per task type (claimable once)
- GameRecord: one row per play
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone


class DailyCheckIn(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="check_ins",
    )
    date = models.DateField()
    consecutive_days = models.PositiveIntegerField(default=1)
    reward = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date"]
        constraints = [
            models.UniqueConstraint(fields=["user", "date"], name="uniq_checkin_per_user_day"),
        ]

    def __str__(self):
        return f"{self.user_id} {self.date} (day {self.consecutive_days})"


class UserTask(models.Model):
    REVIEW_ORDER = "REVIEW_ORDER"
    PHOTO_REVIEW = "PHOTO_REVIEW"
    SHARE_PRODUCT = "SHARE_PRODUCT"
    REFER_FRIEND = "REFER_FRIEND"

    TASK_CHOICES = [
        (REVIEW_ORDER, "Review an order"),
        (PHOTO_REVIEW, "Photo review"),
        (SHARE_PRODUCT, "Share a product"),
        (REFER_FRIEND, "Refer a friend"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reward_tasks",
    )
    task_type = models.CharField(max_length=30, choices=TASK_CHOICES)
    reward = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    metadata = models.JSONField(default=dict, blank=True)

    completed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-completed_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "task_type"], name="uniq_task_per_user"),
        ]

    def __str__(self):
        return f"{self.user_id} {self.task_type}"


class GameRecord(models.Model):
    FEED_PET = "FEED_PET"
    MATCH_THREE = "MATCH_THREE"
    LUCKY_WHEEL = "LUCKY_WHEEL"
    QUIZ = "QUIZ"

    GAME_CHOICES = [
        (FEED_PET, "Feed the pet"),
        (MATCH_THREE, "Match three"),
        (LUCKY_WHEEL, "Lucky wheel"),
        (QUIZ, "Pet quiz"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="game_records",
    )
    game_type = models.CharField(max_length=20, choices=GAME_CHOICES)
    score = models.IntegerField(default=0)
    reward = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    metadata = models.JSONField(default=dict, blank=True)

    played_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-played_at"]
        indexes = [
            models.Index(fields=["user", "played_at"], name="wallet_game_user_played_idx"),
            models.Index(fields=["game_type"], name="wallet_game_type_idx"),
        ]

    def __str__(self):
        return f"{self.user_id} {self.game_type} score={self.score}"
