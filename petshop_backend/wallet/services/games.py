# wallet/services/games.py

"""
======================================================
PATH: wallet/services/games.py
======================================================
MINI-GAME REWARDS

Base rewards:
- FEED_PET: random amount in [0.50, 2.00]
- MATCH_THREE: score >= 1000 -> 1, 2000 -> 3, 3000 -> 5, 5000 -> 10 (below 1000 rejected)
- LUCKY_WHEEL: random prize from LUCKY_WHEEL_PRIZES, once per cooldown window
- QUIZ: 1.00 per correct answer, once per day, zero correct rejected

Play rules:
- FEED_PET + MATCH_THREE share MAX_GAMES_PER_DAY and MIN_GAME_INTERVAL_SECONDS
- reward = base x tier multiplier (2dp), clamped to the daily allowance
"""

from __future__ import annotations

import logging
import math
import random
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Max, Sum
from django.utils import timezone

from membership.models import Membership
from wallet.models import GameRecord
from wallet.services import ledger
from wallet.services.exceptions import (
    GameCooldownError,
    GameDailyLimitError,
    GameRuleError,
    LuckyWheelCooldownError,
    NoCorrectAnswersError,
    QuizAlreadyPlayedError,
    ScoreTooLowError,
)
from wallet.services.rewards import apply_multiplier, clamp_to_allowance

logger = logging.getLogger("wallet")

TWOPLACES = Decimal("0.01")

FEED_PET_MIN = Decimal("0.50")
FEED_PET_MAX = Decimal("2.00")

# (minimum score, base reward), highest first
MATCH_THREE_THRESHOLDS = [
    (5000, Decimal("10")),
    (3000, Decimal("5")),
    (2000, Decimal("3")),
    (1000, Decimal("1")),
]

LUCKY_WHEEL_PRIZES = [
    Decimal("1"),
    Decimal("2"),
    Decimal("3"),
    Decimal("5"),
    Decimal("10"),
    Decimal("20"),
    Decimal("50"),
]

QUIZ_REWARD_PER_CORRECT = Decimal("1.00")

RATE_LIMITED_GAMES = (GameRecord.FEED_PET, GameRecord.MATCH_THREE)


def _limits() -> dict:
    return settings.WALLET_LIMITS


# ---------------------------------------------------------
# Rule checks
# ---------------------------------------------------------
def _check_play_rules(user, *, now) -> None:
    limits = _limits()
    today_plays = GameRecord.objects.filter(
        user=user,
        game_type__in=RATE_LIMITED_GAMES,
        played_at__gte=ledger.start_of_day(now),
    ).count()

    if today_plays >= int(limits["MAX_GAMES_PER_DAY"]):
        raise GameDailyLimitError("Daily game limit reached")

    last = (
        GameRecord.objects.filter(user=user, game_type__in=RATE_LIMITED_GAMES)
        .order_by("-played_at")
        .first()
    )
    if last:
        interval = int(limits["MIN_GAME_INTERVAL_SECONDS"])
        elapsed = (now - last.played_at).total_seconds()
        if elapsed < interval:
            raise GameCooldownError(
                "Please wait before playing again",
                wait_seconds=max(1, math.ceil(interval - elapsed)),
            )


def lucky_wheel_next_available(user, *, now=None):
    now = now or timezone.now()
    cooldown = timedelta(days=int(_limits()["LUCKY_WHEEL_COOLDOWN_DAYS"]))
    recent = (
        GameRecord.objects.filter(user=user, game_type=GameRecord.LUCKY_WHEEL, played_at__gte=now - cooldown)
        .order_by("-played_at")
        .first()
    )
    return recent.played_at + cooldown if recent else None


def match_three_base_reward(score: int) -> Decimal:
    for threshold, reward in MATCH_THREE_THRESHOLDS:
        if score >= threshold:
            return reward
    raise ScoreTooLowError("Score too low for reward", minimum_score=MATCH_THREE_THRESHOLDS[-1][0])


# ---------------------------------------------------------
# Settlement
# ---------------------------------------------------------
def _settle(*, user, game_type: str, score: int, base, metadata: dict, description: str, now) -> GameRecord:
    reward, multiplier = apply_multiplier(user, base)
    reward = clamp_to_allowance(user, reward)

    record = GameRecord.objects.create(
        user=user,
        game_type=game_type,
        score=score,
        reward=reward,
        metadata={**metadata, "base_reward": str(base), "membership_multiplier": str(multiplier)},
        played_at=now,
    )
    ledger.earn(
        user=user,
        amount=reward,
        source=f"GAME_{game_type}",
        description=description,
        metadata={"game_id": str(record.pk), "score": score},
    )
    logger.info(
        "Game reward granted",
        extra={"user_id": str(user.pk), "game_type": game_type, "score": score, "reward": str(reward)},
    )
    return record


@transaction.atomic
def play_feed_pet(*, user) -> GameRecord:
    ledger.lock_wallet(user)
    now = timezone.now()
    _check_play_rules(user, now=now)

    base = Decimal(str(random.uniform(float(FEED_PET_MIN), float(FEED_PET_MAX)))).quantize(
        TWOPLACES, rounding=ROUND_HALF_UP
    )
    return _settle(
        user=user,
        game_type=GameRecord.FEED_PET,
        score=1,
        base=base,
        metadata={},
        description="Feed pet game reward",
        now=now,
    )


@transaction.atomic
def play_match_three(*, user, score: int) -> GameRecord:
    ledger.lock_wallet(user)
    now = timezone.now()
    _check_play_rules(user, now=now)

    base = match_three_base_reward(int(score))
    return _settle(
        user=user,
        game_type=GameRecord.MATCH_THREE,
        score=int(score),
        base=base,
        metadata={},
        description=f"Match three game reward (score: {score})",
        now=now,
    )


@transaction.atomic
def spin_lucky_wheel(*, user) -> GameRecord:
    ledger.lock_wallet(user)
    now = timezone.now()

    next_available = lucky_wheel_next_available(user, now=now)
    if next_available is not None:
        raise LuckyWheelCooldownError(
            "Lucky wheel is available once per week",
            next_available=next_available.isoformat(),
        )

    position = random.randrange(len(LUCKY_WHEEL_PRIZES))
    return _settle(
        user=user,
        game_type=GameRecord.LUCKY_WHEEL,
        score=position,
        base=LUCKY_WHEEL_PRIZES[position],
        metadata={"wheel_position": position},
        description="Lucky wheel reward",
        now=now,
    )


@transaction.atomic
def submit_quiz(*, user, correct_answers: int, total_questions: int) -> GameRecord:
    correct_answers = int(correct_answers)
    total_questions = int(total_questions)

    if total_questions <= 0 or correct_answers < 0 or correct_answers > total_questions:
        raise GameRuleError("correct_answers must be between 0 and total_questions")

    ledger.lock_wallet(user)
    now = timezone.now()

    if GameRecord.objects.filter(
        user=user, game_type=GameRecord.QUIZ, played_at__gte=ledger.start_of_day(now)
    ).exists():
        raise QuizAlreadyPlayedError("Quiz is available once per day")

    if correct_answers == 0:
        raise NoCorrectAnswersError("No correct answers, no reward")

    return _settle(
        user=user,
        game_type=GameRecord.QUIZ,
        score=correct_answers,
        base=QUIZ_REWARD_PER_CORRECT * correct_answers,
        metadata={"correct_answers": correct_answers, "total_questions": total_questions},
        description=f"Quiz game reward ({correct_answers}/{total_questions} correct)",
        now=now,
    )


# ---------------------------------------------------------
# Reads
# ---------------------------------------------------------
def daily_status(user) -> dict:
    now = timezone.now()
    today = GameRecord.objects.filter(user=user, played_at__gte=ledger.start_of_day(now))

    counts = {
        row["game_type"]: row["n"]
        for row in today.values("game_type").annotate(n=Count("id")).order_by()
    }
    games_by_type = {game: int(counts.get(game, 0)) for game, _ in GameRecord.GAME_CHOICES}

    limited_today = sum(games_by_type[g] for g in RATE_LIMITED_GAMES)
    max_per_day = int(_limits()["MAX_GAMES_PER_DAY"])
    next_wheel = lucky_wheel_next_available(user, now=now)

    return {
        "games_by_type": games_by_type,
        "total_games_today": limited_today,
        "max_games_per_day": max_per_day,
        "can_play_more": limited_today < max_per_day,
        "quiz_played_today": games_by_type[GameRecord.QUIZ] > 0,
        "lucky_wheel_next_available": next_wheel,
        "daily_earning_remaining": ledger.daily_remaining(user, now=now),
    }


def leaderboard(*, game_type: str, limit: int = 10) -> list[dict]:
    rows = list(
        GameRecord.objects.filter(game_type=game_type)
        .values("user")
        .annotate(
            total_score=Sum("score"),
            total_reward=Sum("reward"),
            games_played=Count("id"),
            best_score=Max("score"),
        )
        .order_by("-total_score", "-best_score")[:limit]
    )

    user_ids = [r["user"] for r in rows]
    User = get_user_model()
    usernames = dict(User.objects.filter(pk__in=user_ids).values_list("pk", "username"))
    tiers = dict(
        Membership.objects.filter(user_id__in=user_ids, expiry_date__gt=timezone.now()).values_list("user_id", "tier")
    )

    return [
        {
            "rank": i,
            "user_id": r["user"],
            "username": usernames.get(r["user"]) or "Anonymous",
            "membership_tier": tiers.get(r["user"]),
            "total_score": r["total_score"] or 0,
            "total_reward": r["total_reward"] or Decimal("0.00"),
            "games_played": r["games_played"],
            "best_score": r["best_score"] or 0,
        }
        for i, r in enumerate(rows, start=1)
    ]
