# wallet/services/rewards.py

"""
======================================================
PATH: wallet/services/rewards.py
======================================================
DAILY CHECK-IN + TASK REWARDS

Check-in:
- once per calendar day
- streak continues when yesterday has a check-in, else resets to 1
- reward = 1.00 + tier check-in bonus (+5 on day 7, +30 on day 30)

Tasks:
- each task type is claimable once per user
- reward = base x tier multiplier (2dp)

Both are clamped to the remaining daily allowance and rejected
when no allowance remains.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.utils import timezone

from membership.services.memberships import checkin_bonus, reward_multiplier
from wallet.models import DailyCheckIn, UserTask, WalletTransaction
from wallet.services import ledger
from wallet.services.exceptions import (
    AlreadyCheckedInError,
    DailyEarningLimitError,
    InvalidTaskError,
    TaskAlreadyCompletedError,
)

logger = logging.getLogger("wallet")

TWOPLACES = Decimal("0.01")

CHECKIN_BASE_REWARD = Decimal("1.00")
STREAK_BONUSES = {
    7: Decimal("5.00"),
    30: Decimal("30.00"),
}

TASK_REWARDS = {
    UserTask.REVIEW_ORDER: Decimal("3.00"),
    UserTask.PHOTO_REVIEW: Decimal("5.00"),
    UserTask.SHARE_PRODUCT: Decimal("0.50"),
    UserTask.REFER_FRIEND: Decimal("20.00"),
}


def _money(v) -> Decimal:
    return Decimal(v).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def clamp_to_allowance(user, reward) -> Decimal:
    """
    Clamp a reward to what is left of today's earning allowance.
    Raises DailyEarningLimitError when nothing remains.
    """
    remaining = ledger.daily_remaining(user)
    if remaining <= 0:
        raise DailyEarningLimitError("Daily earning limit reached")
    return min(_money(reward), remaining)


def apply_multiplier(user, base) -> tuple[Decimal, Decimal]:
    multiplier = reward_multiplier(user)
    return _money(Decimal(base) * multiplier), multiplier


# ---------------------------------------------------------
# Daily check-in
# ---------------------------------------------------------
def checkin_reward_for(user, streak: int) -> Decimal:
    return _money(CHECKIN_BASE_REWARD + checkin_bonus(user) + STREAK_BONUSES.get(streak, Decimal("0")))


@transaction.atomic
def daily_check_in(*, user) -> DailyCheckIn:
    ledger.lock_wallet(user)
    today = timezone.localdate()

    if DailyCheckIn.objects.filter(user=user, date=today).exists():
        raise AlreadyCheckedInError("Already checked in today")

    yesterday = DailyCheckIn.objects.filter(user=user, date=today - timedelta(days=1)).first()
    streak = yesterday.consecutive_days + 1 if yesterday else 1

    reward = clamp_to_allowance(user, checkin_reward_for(user, streak))

    check_in = DailyCheckIn.objects.create(
        user=user,
        date=today,
        consecutive_days=streak,
        reward=reward,
    )
    ledger.earn(
        user=user,
        amount=reward,
        source=WalletTransaction.SOURCE_DAILY_CHECKIN,
        description=f"Daily check-in (day {streak})",
        metadata={"consecutive_days": streak},
    )
    return check_in


def check_in_status(user) -> dict:
    today = timezone.localdate()
    latest = DailyCheckIn.objects.filter(user=user).order_by("-date").first()

    checked_in_today = bool(latest and latest.date == today)
    if latest and latest.date >= today - timedelta(days=1):
        streak = latest.consecutive_days
    else:
        streak = 0

    return {
        "checked_in_today": checked_in_today,
        "consecutive_days": streak,
        "last_check_in_date": latest.date if latest else None,
        "next_reward": checkin_reward_for(user, streak + 1),
    }


# ---------------------------------------------------------
# Tasks
# ---------------------------------------------------------
@transaction.atomic
def complete_task(*, user, task_type: str, metadata=None) -> UserTask:
    task_type = (task_type or "").strip().upper()
    base = TASK_REWARDS.get(task_type)
    if base is None:
        raise InvalidTaskError(f"Invalid task type: {task_type}")

    ledger.lock_wallet(user)

    if UserTask.objects.filter(user=user, task_type=task_type).exists():
        raise TaskAlreadyCompletedError("Task already completed")

    reward, multiplier = apply_multiplier(user, base)
    reward = clamp_to_allowance(user, reward)

    task = UserTask.objects.create(
        user=user,
        task_type=task_type,
        reward=reward,
        metadata=metadata or {},
    )
    ledger.earn(
        user=user,
        amount=reward,
        source=f"TASK_{task_type}",
        description=f"Task reward: {task.get_task_type_display()}",
        metadata={
            "task_id": str(task.pk),
            "base_reward": str(base),
            "membership_multiplier": str(multiplier),
        },
    )
    logger.info("Task completed", extra={"user_id": str(user.pk), "task_type": task_type, "reward": str(reward)})
    return task


def task_status(user) -> list[dict]:
    done = {t.task_type: t for t in UserTask.objects.filter(user=user)}
    out = []
    for task_type, label in UserTask.TASK_CHOICES:
        task = done.get(task_type)
        out.append(
            {
                "task_type": task_type,
                "label": label,
                "base_reward": TASK_REWARDS[task_type],
                "completed": task is not None,
                "reward": task.reward if task else None,
                "completed_at": task.completed_at if task else None,
            }
        )
    return out
