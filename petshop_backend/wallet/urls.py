# wallet/urls.py

from django.urls import path

from wallet.views import (
    CheckInStatusView,
    CheckInView,
    FeedPetView,
    GameDailyStatusView,
    LeaderboardView,
    LuckyWheelView,
    MatchThreeView,
    QuizView,
    RedeemFreeDeliveryView,
    StaffWalletAdjustView,
    StaffWalletDetailView,
    TaskCompleteView,
    TaskListView,
    WalletTransactionListView,
    WalletView,
)

app_name = "wallet"

urlpatterns = [
    path("", WalletView.as_view(), name="wallet"),
    path("transactions/", WalletTransactionListView.as_view(), name="transactions"),
    path("redeem/free-delivery/", RedeemFreeDeliveryView.as_view(), name="redeem-free-delivery"),
    # ---------------- REWARDS ----------------
    path("check-in/", CheckInView.as_view(), name="check-in"),
    path("check-in/status/", CheckInStatusView.as_view(), name="check-in-status"),
    path("tasks/", TaskListView.as_view(), name="tasks"),
    path("tasks/complete/", TaskCompleteView.as_view(), name="task-complete"),
    path("games/feed-pet/", FeedPetView.as_view(), name="game-feed-pet"),
    path("games/match-three/", MatchThreeView.as_view(), name="game-match-three"),
    path("games/lucky-wheel/", LuckyWheelView.as_view(), name="game-lucky-wheel"),
    path("games/quiz/", QuizView.as_view(), name="game-quiz"),
    path("games/daily-status/", GameDailyStatusView.as_view(), name="game-daily-status"),
    path("games/leaderboard/", LeaderboardView.as_view(), name="game-leaderboard"),
    # ---------------- STAFF ----------------
    path("manage/users/<uuid:user_id>/", StaffWalletDetailView.as_view(), name="staff-wallet"),
    path("manage/users/<uuid:user_id>/adjust/", StaffWalletAdjustView.as_view(), name="staff-wallet-adjust"),
]
