# wallet/tests/test_games.py

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from membership.services.memberships import grant_membership
from membership.tiers import GOLDEN_PAW
from wallet.models import GameRecord, WalletTransaction
from wallet.services import games
from wallet.services.exceptions import (
    DailyEarningLimitError,
    GameCooldownError,
    GameDailyLimitError,
    LuckyWheelCooldownError,
    NoCorrectAnswersError,
    QuizAlreadyPlayedError,
    ScoreTooLowError,
)

User = get_user_model()


class GameRewardTests(TestCase):
    """
    GUARANTEES:
    - Rewards follow the per-game tables, x tier multiplier
    - Feed pet / match three share a daily cap and a minimum interval
    - Lucky wheel once per week, quiz once per day
    """

    def setUp(self):
        self.user = User.objects.create_user(email="g@example.com", password="x")

    def test_feed_pet_random_reward(self):
        with mock.patch("wallet.services.games.random.uniform", return_value=1.234):
            record = games.play_feed_pet(user=self.user)

        self.assertEqual(record.reward, Decimal("1.23"))
        txn = WalletTransaction.objects.get(user=self.user)
        self.assertEqual(txn.source, "GAME_FEED_PET")

    def test_match_three_thresholds_with_multiplier(self):
        grant_membership(user=self.user, tier_key=GOLDEN_PAW)
        record = games.play_match_three(user=self.user, score=3200)
        self.assertEqual(record.reward, Decimal("7.50"))

    def test_match_three_score_too_low(self):
        with self.assertRaises(ScoreTooLowError):
            games.play_match_three(user=self.user, score=999)
        self.assertFalse(GameRecord.objects.exists())

    def test_minimum_interval_between_plays(self):
        games.play_match_three(user=self.user, score=1000)
        with self.assertRaises(GameCooldownError) as ctx:
            games.play_match_three(user=self.user, score=1000)
        self.assertGreater(ctx.exception.details["wait_seconds"], 0)

    def test_daily_game_cap(self):
        played_at = timezone.now() - timedelta(minutes=2)
        for _ in range(10):
            GameRecord.objects.create(
                user=self.user,
                game_type=GameRecord.MATCH_THREE,
                score=1000,
                reward=Decimal("1.00"),
                played_at=played_at,
            )

        with self.assertRaises(GameDailyLimitError):
            games.play_match_three(user=self.user, score=1000)

    def test_lucky_wheel_once_per_week(self):
        with mock.patch("wallet.services.games.random.randrange", return_value=4):
            record = games.spin_lucky_wheel(user=self.user)

        self.assertEqual(record.score, 4)
        self.assertEqual(record.reward, Decimal("10.00"))

        with self.assertRaises(LuckyWheelCooldownError):
            games.spin_lucky_wheel(user=self.user)

    def test_lucky_wheel_not_limited_by_game_interval(self):
        games.play_match_three(user=self.user, score=1000)
        with mock.patch("wallet.services.games.random.randrange", return_value=0):
            record = games.spin_lucky_wheel(user=self.user)
        self.assertEqual(record.reward, Decimal("1.00"))

    def test_lucky_wheel_prize_clamped_by_allowance(self):
        with mock.patch("wallet.services.games.random.randrange", return_value=6):
            record = games.spin_lucky_wheel(user=self.user)
        self.assertEqual(record.reward, Decimal("50.00"))

        with self.assertRaises(DailyEarningLimitError):
            games.submit_quiz(user=self.user, correct_answers=3, total_questions=5)

    def test_quiz_once_per_day(self):
        record = games.submit_quiz(user=self.user, correct_answers=3, total_questions=5)
        self.assertEqual(record.reward, Decimal("3.00"))

        with self.assertRaises(QuizAlreadyPlayedError):
            games.submit_quiz(user=self.user, correct_answers=5, total_questions=5)

    def test_quiz_zero_correct_rejected(self):
        with self.assertRaises(NoCorrectAnswersError):
            games.submit_quiz(user=self.user, correct_answers=0, total_questions=5)

    def test_daily_status(self):
        games.play_match_three(user=self.user, score=2000)
        data = games.daily_status(self.user)

        self.assertEqual(data["games_by_type"][GameRecord.MATCH_THREE], 1)
        self.assertEqual(data["total_games_today"], 1)
        self.assertTrue(data["can_play_more"])
        self.assertEqual(data["daily_earning_remaining"], Decimal("47.00"))

    def test_leaderboard_orders_by_total_score(self):
        other = User.objects.create_user(email="o@example.com", username="otter", password="x")
        GameRecord.objects.create(user=self.user, game_type=GameRecord.MATCH_THREE, score=1200, reward=Decimal("1"))
        GameRecord.objects.create(user=other, game_type=GameRecord.MATCH_THREE, score=3000, reward=Decimal("5"))
        GameRecord.objects.create(user=self.user, game_type=GameRecord.MATCH_THREE, score=1000, reward=Decimal("1"))

        rows = games.leaderboard(game_type=GameRecord.MATCH_THREE)

        self.assertEqual([r["username"] for r in rows], ["otter", self.user.username])
        self.assertEqual(rows[1]["total_score"], 2200)
        self.assertEqual(rows[1]["games_played"], 2)
        self.assertEqual(rows[1]["best_score"], 1200)


class GameApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="ga@example.com", password="x")
        self.client.force_authenticate(user=self.user)

    def test_match_three_endpoint(self):
        res = self.client.post("/api/wallet/games/match-three/", {"score": 5000})
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["reward"], "10.00")
        self.assertEqual(res.data["new_balance"], "10.00")

    def test_cooldown_is_429(self):
        self.client.post("/api/wallet/games/match-three/", {"score": 1000})
        res = self.client.post("/api/wallet/games/match-three/", {"score": 1000})
        self.assertEqual(res.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(res.data["error"]["code"], "GAME_COOLDOWN")
        self.assertIn("wait_seconds", res.data["error"])

    def test_quiz_validation(self):
        res = self.client.post("/api/wallet/games/quiz/", {"correct_answers": 6, "total_questions": 5})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_oversized_scores_rejected_before_storage(self):
        res = self.client.post("/api/wallet/games/match-three/", {"score": 10**19})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

        res = self.client.post(
            "/api/wallet/games/quiz/",
            {"correct_answers": 2**31, "total_questions": 2**31},
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

        self.assertFalse(GameRecord.objects.filter(user=self.user).exists())

    def test_leaderboard_requires_game_type(self):
        res = self.client.get("/api/wallet/games/leaderboard/")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

        res = self.client.get("/api/wallet/games/leaderboard/?game_type=quiz")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["leaderboard"], [])
