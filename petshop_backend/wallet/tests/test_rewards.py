# wallet/tests/test_rewards.py

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from membership.services.memberships import grant_membership
from membership.tiers import DIAMOND_PAW, GOLDEN_PAW
from wallet.models import DailyCheckIn, UserTask, WalletTransaction
from wallet.services import ledger, rewards
from wallet.services.exceptions import (
    AlreadyCheckedInError,
    DailyEarningLimitError,
    TaskAlreadyCompletedError,
)

User = get_user_model()


class DailyCheckInTests(TestCase):
    """
    GUARANTEES:
    - One check-in per day
    - Streak continues only from yesterday
    - Reward = 1.00 + tier bonus (+5 on day 7, +30 on day 30), clamped to the daily allowance
    """

    def setUp(self):
        self.user = User.objects.create_user(email="c@example.com", password="x")

    def test_first_check_in(self):
        check_in = rewards.daily_check_in(user=self.user)

        self.assertEqual(check_in.consecutive_days, 1)
        self.assertEqual(check_in.reward, Decimal("1.00"))
        txn = WalletTransaction.objects.get(user=self.user)
        self.assertEqual(txn.source, WalletTransaction.SOURCE_DAILY_CHECKIN)
        self.assertEqual(txn.metadata, {"consecutive_days": 1})

    def test_second_check_in_same_day_rejected(self):
        rewards.daily_check_in(user=self.user)
        with self.assertRaises(AlreadyCheckedInError):
            rewards.daily_check_in(user=self.user)

    def test_seventh_day_bonus(self):
        DailyCheckIn.objects.create(
            user=self.user,
            date=timezone.localdate() - timedelta(days=1),
            consecutive_days=6,
            reward=Decimal("1.00"),
        )
        check_in = rewards.daily_check_in(user=self.user)

        self.assertEqual(check_in.consecutive_days, 7)
        self.assertEqual(check_in.reward, Decimal("6.00"))

    def test_thirtieth_day_bonus_with_tier(self):
        grant_membership(user=self.user, tier_key=DIAMOND_PAW)
        DailyCheckIn.objects.create(
            user=self.user,
            date=timezone.localdate() - timedelta(days=1),
            consecutive_days=29,
            reward=Decimal("1.00"),
        )
        check_in = rewards.daily_check_in(user=self.user)

        # 1.00 + 2.00 (diamond) + 30.00
        self.assertEqual(check_in.reward, Decimal("33.00"))

    def test_gap_resets_streak(self):
        DailyCheckIn.objects.create(
            user=self.user,
            date=timezone.localdate() - timedelta(days=2),
            consecutive_days=5,
            reward=Decimal("1.00"),
        )
        check_in = rewards.daily_check_in(user=self.user)
        self.assertEqual(check_in.consecutive_days, 1)

    def test_reward_clamped_to_daily_allowance(self):
        ledger.earn(user=self.user, amount="49.50", source="GAME_QUIZ")
        check_in = rewards.daily_check_in(user=self.user)
        self.assertEqual(check_in.reward, Decimal("0.50"))

    def test_rejected_when_allowance_exhausted(self):
        ledger.earn(user=self.user, amount="50", source="GAME_QUIZ")
        with self.assertRaises(DailyEarningLimitError):
            rewards.daily_check_in(user=self.user)
        self.assertFalse(DailyCheckIn.objects.filter(user=self.user).exists())

    def test_status(self):
        status_before = rewards.check_in_status(self.user)
        self.assertFalse(status_before["checked_in_today"])
        self.assertEqual(status_before["consecutive_days"], 0)

        rewards.daily_check_in(user=self.user)
        status_after = rewards.check_in_status(self.user)
        self.assertTrue(status_after["checked_in_today"])
        self.assertEqual(status_after["consecutive_days"], 1)
        self.assertEqual(status_after["last_check_in_date"], timezone.localdate())


class TaskRewardTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="t@example.com", password="x")

    def test_task_reward_with_multiplier(self):
        grant_membership(user=self.user, tier_key=GOLDEN_PAW)
        task = rewards.complete_task(user=self.user, task_type="review_order")

        self.assertEqual(task.task_type, UserTask.REVIEW_ORDER)
        self.assertEqual(task.reward, Decimal("4.50"))

        txn = WalletTransaction.objects.get(user=self.user)
        self.assertEqual(txn.source, "TASK_REVIEW_ORDER")
        self.assertEqual(txn.metadata["base_reward"], "3.00")

    def test_task_claimable_once(self):
        rewards.complete_task(user=self.user, task_type=UserTask.SHARE_PRODUCT)
        with self.assertRaises(TaskAlreadyCompletedError):
            rewards.complete_task(user=self.user, task_type=UserTask.SHARE_PRODUCT)

    def test_task_status_lists_all_tasks(self):
        rewards.complete_task(user=self.user, task_type=UserTask.REFER_FRIEND)
        items = {i["task_type"]: i for i in rewards.task_status(self.user)}

        self.assertEqual(len(items), 4)
        self.assertTrue(items[UserTask.REFER_FRIEND]["completed"])
        self.assertFalse(items[UserTask.PHOTO_REVIEW]["completed"])


class RewardApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="api@example.com", password="x")
        self.client.force_authenticate(user=self.user)

    def test_check_in_endpoint(self):
        res = self.client.post("/api/wallet/check-in/")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["reward"], "1.00")
        self.assertEqual(res.data["new_balance"], "1.00")

        res = self.client.post("/api/wallet/check-in/")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "ALREADY_CHECKED_IN")

    def test_daily_limit_is_429(self):
        ledger.earn(user=self.user, amount="50", source="GAME_QUIZ")
        res = self.client.post("/api/wallet/tasks/complete/", {"task_type": "PHOTO_REVIEW"})
        self.assertEqual(res.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(res.data["error"]["code"], "DAILY_EARNING_LIMIT_REACHED")

    def test_unknown_task_is_400(self):
        res = self.client.post("/api/wallet/tasks/complete/", {"task_type": "DANCE"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_wallet_info(self):
        res = self.client.get("/api/wallet/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["limits"]["max_daily_earning"], "50.00")
        self.assertEqual(res.data["limits"]["max_wallet_usage_percent"], 30)
