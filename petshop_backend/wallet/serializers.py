# wallet/serializers.py

from rest_framework import serializers

from wallet.models import DailyCheckIn, GameRecord, UserTask, Wallet, WalletTransaction

# GameRecord.score is a signed 32-bit column
MAX_GAME_VALUE = 2_147_483_647


class WalletSerializer(serializers.ModelSerializer):
    class Meta:
        model = Wallet
        fields = [
            "id",
            "balance",
            "frozen_balance",
            "total_earned",
            "total_spent",
            "updated_at",
        ]
        read_only_fields = fields


class WalletTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = WalletTransaction
        fields = [
            "id",
            "type",
            "source",
            "amount",
            "balance_before",
            "balance_after",
            "description",
            "metadata",
            "reference",
            "created_at",
        ]
        read_only_fields = fields


class DailyCheckInSerializer(serializers.ModelSerializer):
    class Meta:
        model = DailyCheckIn
        fields = ["id", "date", "consecutive_days", "reward", "created_at"]
        read_only_fields = fields


class UserTaskSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserTask
        fields = ["id", "task_type", "reward", "metadata", "completed_at"]
        read_only_fields = fields


class GameRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = GameRecord
        fields = ["id", "game_type", "score", "reward", "metadata", "played_at"]
        read_only_fields = fields


class TaskCompleteSerializer(serializers.Serializer):
    task_type = serializers.ChoiceField(choices=UserTask.TASK_CHOICES)
    metadata = serializers.JSONField(required=False, default=dict)


class MatchThreeSerializer(serializers.Serializer):
    score = serializers.IntegerField(min_value=0, max_value=MAX_GAME_VALUE)


class QuizSerializer(serializers.Serializer):
    correct_answers = serializers.IntegerField(min_value=0, max_value=MAX_GAME_VALUE)
    total_questions = serializers.IntegerField(min_value=1, max_value=MAX_GAME_VALUE)

    def validate(self, attrs):
        if attrs["correct_answers"] > attrs["total_questions"]:
            raise serializers.ValidationError({"correct_answers": "cannot exceed total_questions"})
        return attrs


class WalletAdjustSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    note = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)

    def validate_amount(self, value):
        if value == 0:
            raise serializers.ValidationError("amount must be non-zero")
        return value
