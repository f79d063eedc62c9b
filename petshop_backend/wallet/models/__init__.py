from .activity import DailyCheckIn, GameRecord, UserTask
from .wallet import Wallet, WalletTransaction

__all__ = [
    "DailyCheckIn",
    "GameRecord",
    "UserTask",
    "Wallet",
    "WalletTransaction",
]
