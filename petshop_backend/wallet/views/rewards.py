# wallet/views/rewards.py

"""
CHECK-IN + TASKS + GAMES (authenticated customer)

POST /api/wallet/check-in/             GET /api/wallet/check-in/status/
GET  /api/wallet/tasks/                POST /api/wallet/tasks/complete/
POST /api/wallet/games/feed-pet/       POST /api/wallet/games/match-three/
POST /api/wallet/games/lucky-wheel/    POST /api/wallet/games/quiz/
GET  /api/wallet/games/daily-status/   GET  /api/wallet/games/leaderboard/?game_type=&limit=

Rate rules (daily allowance, game caps, cooldowns) answer 429.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from wallet.models import GameRecord
from wallet.serializers import (
    DailyCheckInSerializer,
    GameRecordSerializer,
    MatchThreeSerializer,
    QuizSerializer,
    TaskCompleteSerializer,
    UserTaskSerializer,
)
from wallet.services import games, ledger, rewards
from wallet.services.exceptions import WalletError
from wallet.views.common import WalletPlayThrottle, error_response, wallet_error_response


def _balance(user) -> str:
    return str(ledger.get_or_create_wallet(user).balance)


class _RewardView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [WalletPlayThrottle]


# ---------------------------------------------------------
# Check-in
# ---------------------------------------------------------
class CheckInView(_RewardView):
    @extend_schema(
        tags=["Wallet"],
        request=None,
        responses={
            201: DailyCheckInSerializer,
            400: OpenApiResponse(description="Already checked in today"),
            429: OpenApiResponse(description="Daily earning limit reached"),
        },
    )
    def post(self, request):
        try:
            check_in = rewards.daily_check_in(user=request.user)
        except WalletError as exc:
            return wallet_error_response(exc)

        return Response(
            {
                "check_in": DailyCheckInSerializer(check_in).data,
                "reward": str(check_in.reward),
                "consecutive_days": check_in.consecutive_days,
                "new_balance": _balance(request.user),
            },
            status=status.HTTP_201_CREATED,
        )


class CheckInStatusView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Wallet"])
    def get(self, request):
        data = rewards.check_in_status(request.user)
        data["next_reward"] = str(data["next_reward"])
        return Response(data)


# ---------------------------------------------------------
# Tasks
# ---------------------------------------------------------
class TaskListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Wallet"])
    def get(self, request):
        items = rewards.task_status(request.user)
        for item in items:
            item["base_reward"] = str(item["base_reward"])
            item["reward"] = str(item["reward"]) if item["reward"] is not None else None
        return Response({"tasks": items})


class TaskCompleteView(_RewardView):
    @extend_schema(tags=["Wallet"], request=TaskCompleteSerializer, responses={201: UserTaskSerializer})
    def post(self, request):
        s = TaskCompleteSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            task = rewards.complete_task(
                user=request.user,
                task_type=s.validated_data["task_type"],
                metadata=s.validated_data.get("metadata") or {},
            )
        except WalletError as exc:
            return wallet_error_response(exc)

        return Response(
            {
                "task": UserTaskSerializer(task).data,
                "reward": str(task.reward),
                "new_balance": _balance(request.user),
            },
            status=status.HTTP_201_CREATED,
        )


# ---------------------------------------------------------
# Games
# ---------------------------------------------------------
def _game_response(user, record):
    return Response(
        {
            "game": GameRecordSerializer(record).data,
            "reward": str(record.reward),
            "new_balance": _balance(user),
        },
        status=status.HTTP_201_CREATED,
    )


class FeedPetView(_RewardView):
    @extend_schema(tags=["Wallet"], request=None, responses={201: GameRecordSerializer})
    def post(self, request):
        try:
            record = games.play_feed_pet(user=request.user)
        except WalletError as exc:
            return wallet_error_response(exc)
        return _game_response(request.user, record)


class MatchThreeView(_RewardView):
    @extend_schema(tags=["Wallet"], request=MatchThreeSerializer, responses={201: GameRecordSerializer})
    def post(self, request):
        s = MatchThreeSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            record = games.play_match_three(user=request.user, score=s.validated_data["score"])
        except WalletError as exc:
            return wallet_error_response(exc)
        return _game_response(request.user, record)


class LuckyWheelView(_RewardView):
    @extend_schema(tags=["Wallet"], request=None, responses={201: GameRecordSerializer})
    def post(self, request):
        try:
            record = games.spin_lucky_wheel(user=request.user)
        except WalletError as exc:
            return wallet_error_response(exc)
        return _game_response(request.user, record)


class QuizView(_RewardView):
    @extend_schema(tags=["Wallet"], request=QuizSerializer, responses={201: GameRecordSerializer})
    def post(self, request):
        s = QuizSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            record = games.submit_quiz(
                user=request.user,
                correct_answers=s.validated_data["correct_answers"],
                total_questions=s.validated_data["total_questions"],
            )
        except WalletError as exc:
            return wallet_error_response(exc)
        return _game_response(request.user, record)


class GameDailyStatusView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Wallet"])
    def get(self, request):
        data = games.daily_status(request.user)
        data["daily_earning_remaining"] = str(data["daily_earning_remaining"])
        return Response(data)


class LeaderboardView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Wallet"],
        parameters=[
            OpenApiParameter(name="game_type", type=str, location=OpenApiParameter.QUERY, required=True),
            OpenApiParameter(name="limit", type=int, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def get(self, request):
        game_type = (request.query_params.get("game_type") or "").strip().upper()
        if game_type not in dict(GameRecord.GAME_CHOICES):
            return error_response(
                code="INVALID_GAME_TYPE",
                message="game_type is required (FEED_PET, MATCH_THREE, LUCKY_WHEEL, QUIZ)",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            limit = int(request.query_params.get("limit", 10))
        except (TypeError, ValueError):
            limit = 10
        limit = max(1, min(limit, 100))

        rows = games.leaderboard(game_type=game_type, limit=limit)
        for row in rows:
            row["user_id"] = str(row["user_id"])
            row["total_reward"] = str(row["total_reward"])
        return Response({"game_type": game_type, "leaderboard": rows})
