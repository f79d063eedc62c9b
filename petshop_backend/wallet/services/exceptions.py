# wallet/services/exceptions.py

"""
WALLET DOMAIN ERRORS

Each error carries:
- code: stable UPPER_SNAKE identifier for the API body
- http_status: 400 business rule, 429 rate rule
- details: optional extra fields for the error body (wait time, next slot)
"""


class WalletError(Exception):
    code = "WALLET_ERROR"
    http_status = 400

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidAmountError(WalletError):
    code = "INVALID_AMOUNT"


class InsufficientWalletBalanceError(WalletError):
    code = "INSUFFICIENT_WALLET_BALANCE"


class DailyEarningLimitError(WalletError):
    code = "DAILY_EARNING_LIMIT_REACHED"
    http_status = 429


class AlreadyCheckedInError(WalletError):
    code = "ALREADY_CHECKED_IN"


class InvalidTaskError(WalletError):
    code = "INVALID_TASK"


class TaskAlreadyCompletedError(WalletError):
    code = "TASK_ALREADY_COMPLETED"


class GameRuleError(WalletError):
    code = "GAME_RULE_VIOLATION"


class GameDailyLimitError(GameRuleError):
    code = "GAME_DAILY_LIMIT_REACHED"
    http_status = 429


class GameCooldownError(GameRuleError):
    code = "GAME_COOLDOWN"
    http_status = 429


class LuckyWheelCooldownError(GameRuleError):
    code = "LUCKY_WHEEL_COOLDOWN"
    http_status = 429


class QuizAlreadyPlayedError(GameRuleError):
    code = "QUIZ_ALREADY_PLAYED"
    http_status = 429


class ScoreTooLowError(GameRuleError):
    code = "SCORE_TOO_LOW"


class NoCorrectAnswersError(GameRuleError):
    code = "NO_CORRECT_ANSWERS"
