from .rewards import (
    CheckInStatusView,
    CheckInView,
    FeedPetView,
    GameDailyStatusView,
    LeaderboardView,
    LuckyWheelView,
    MatchThreeView,
    QuizView,
    TaskCompleteView,
    TaskListView,
)
from .staff import StaffWalletAdjustView, StaffWalletDetailView
from .wallet import RedeemFreeDeliveryView, WalletTransactionListView, WalletView

__all__ = [
    "CheckInStatusView",
    "CheckInView",
    "FeedPetView",
    "GameDailyStatusView",
    "LeaderboardView",
    "LuckyWheelView",
    "MatchThreeView",
    "QuizView",
    "RedeemFreeDeliveryView",
    "StaffWalletAdjustView",
    "StaffWalletDetailView",
    "TaskCompleteView",
    "TaskListView",
    "WalletTransactionListView",
    "WalletView",
]
