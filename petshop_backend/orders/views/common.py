# orders/views/common.py

from rest_framework.response import Response


def error_response(*, code: str, message: str, http_status: int, details=None):
    body = {"code": code, "message": message}
    if details:
        body.update(details)
    return Response({"error": body}, status=http_status)


def service_error_response(exc):
    """
    Works for every domain error that carries code / message / http_status.
    """
    return error_response(
        code=exc.code,
        message=exc.message,
        http_status=exc.http_status,
        details=getattr(exc, "details", None),
    )
