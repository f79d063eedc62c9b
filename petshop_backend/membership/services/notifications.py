# membership/services/notifications.py

"""
MEMBERSHIP E-MAILS

Plain-text notices sent through Django's e-mail framework.
Failures are logged and reported as False; they never undo a renewal.
"""

from __future__ import annotations

import logging
from smtplib import SMTPException

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger("membership")


def _send(*, user, subject: str, body: str) -> bool:
    if not user.email:
        return False
    try:
        send_mail(
            subject=subject,
            message=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[user.email],
        )
    except (SMTPException, OSError):
        logger.exception("Membership e-mail failed", extra={"user_id": str(user.pk), "subject": subject})
        return False
    return True


def send_expiring_notice(membership, *, days_left: int) -> bool:
    tier = membership.tier_info
    return _send(
        user=membership.user,
        subject=f"Your {tier.name} membership expires in {days_left} days",
        body=(
            f"Hi {membership.user.full_name},\n\n"
            f"Your {tier.name} membership expires on {membership.expiry_date:%Y-%m-%d}.\n"
            + (
                "Auto-renew is on, so we will renew it from your wallet balance.\n"
                if membership.auto_renew
                else "Renew now to keep your member discount and reward bonus.\n"
            )
            + f"\n{settings.FRONTEND_BASE_URL}/membership\n"
        ),
    )


def send_renewed_notice(membership) -> bool:
    tier = membership.tier_info
    return _send(
        user=membership.user,
        subject=f"Your {tier.name} membership has been renewed",
        body=(
            f"Hi {membership.user.full_name},\n\n"
            f"Your {tier.name} membership was renewed for {tier.price} {settings.STORE_CURRENCY}.\n"
            f"It is now valid until {membership.expiry_date:%Y-%m-%d}.\n"
        ),
    )


def send_auto_renew_failed_notice(membership, *, reason: str) -> bool:
    tier = membership.tier_info
    return _send(
        user=membership.user,
        subject=f"We could not renew your {tier.name} membership",
        body=(
            f"Hi {membership.user.full_name},\n\n"
            f"Auto-renewal of your {tier.name} membership failed: {reason}\n"
            f"Top up your wallet and renew from {settings.FRONTEND_BASE_URL}/membership\n"
        ),
    )
