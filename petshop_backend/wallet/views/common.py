# wallet/views/common.py

from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle


class WalletPlayThrottle(UserRateThrottle):
    scope = "wallet_play"


def error_response(*, code: str, message: str, http_status: int, details=None):
    body = {"code": code, "message": message}
    if details:
        body.update(details)
    return Response({"error": body}, status=http_status)


def wallet_error_response(exc):
    return error_response(
        code=exc.code,
        message=exc.message,
        http_status=exc.http_status,
        details=getattr(exc, "details", None),
    )
