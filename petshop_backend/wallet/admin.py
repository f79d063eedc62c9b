# wallet/admin.py

from django.contrib import admin

from wallet.models import DailyCheckIn, GameRecord, UserTask, Wallet, WalletTransaction


class _ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Wallet)
class WalletAdmin(_ReadOnlyAdmin):
    list_display = ("user", "balance", "frozen_balance", "total_earned", "total_spent", "updated_at")
    search_fields = ("user__email", "user__username")


@admin.register(WalletTransaction)
class WalletTransactionAdmin(_ReadOnlyAdmin):
    list_display = ("user", "type", "source", "amount", "balance_after", "reference", "created_at")
    list_filter = ("type", "source")
    search_fields = ("user__email", "reference")


@admin.register(DailyCheckIn)
class DailyCheckInAdmin(_ReadOnlyAdmin):
    list_display = ("user", "date", "consecutive_days", "reward")


@admin.register(UserTask)
class UserTaskAdmin(_ReadOnlyAdmin):
    list_display = ("user", "task_type", "reward", "completed_at")
    list_filter = ("task_type",)


@admin.register(GameRecord)
class GameRecordAdmin(_ReadOnlyAdmin):
    list_display = ("user", "game_type", "score", "reward", "played_at")
    list_filter = ("game_type",)
