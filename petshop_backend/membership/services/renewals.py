# membership/services/renewals.py

"""
DAILY MEMBERSHIP JOB

1) Expiry notices: memberships whose expiry falls on the day
   MEMBERSHIP_EXPIRY_NOTICE_DAYS from today (or the day before),
   announced once per expiry date.
2) Auto-renewals: auto_renew memberships expiring between the start of
   today and the end of tomorrow; charged from the wallet.
   Insufficient balance -> auto-renew-failed e-mail (once per expiry date),
   membership untouched; the charge is retried on the next run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from membership.models import Membership
from membership.services import notifications
from membership.services.memberships import renew_membership
from wallet.services.exceptions import WalletError

logger = logging.getLogger("membership")


@dataclass
class ProcessResult:
    notices_sent: int = 0
    renewed: int = 0
    renewal_failed: int = 0


def _start_of_day(now):
    local = timezone.localtime(now)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def send_expiry_notices(*, now=None) -> int:
    now = now or timezone.now()
    days = int(settings.MEMBERSHIP_EXPIRY_NOTICE_DAYS)
    today = _start_of_day(now)

    window_start = today + timedelta(days=days - 1)
    window_end = today + timedelta(days=days + 1)

    qs = (
        Membership.objects.select_related("user")
        .filter(expiry_date__gte=window_start, expiry_date__lt=window_end)
        .exclude(user__email="")
    )

    sent = 0
    for membership in qs:
        if membership.last_expiry_notice_for == membership.expiry_date:
            continue

        days_left = max(0, (membership.expiry_date - now).days + 1)
        if notifications.send_expiring_notice(membership, days_left=days_left):
            membership.last_expiry_notice_for = membership.expiry_date
            membership.save(update_fields=["last_expiry_notice_for", "updated_at"])
            sent += 1

    return sent


def process_auto_renewals(*, now=None) -> tuple[int, int]:
    now = now or timezone.now()
    today = _start_of_day(now)

    qs = Membership.objects.select_related("user").filter(
        auto_renew=True,
        expiry_date__gte=today,
        expiry_date__lt=today + timedelta(days=2),
    )

    renewed = failed = 0
    for membership in qs:
        try:
            membership = renew_membership(membership=membership)
        except WalletError as exc:
            failed += 1
            logger.warning(
                "Membership auto-renewal failed",
                extra={"user_id": str(membership.user_id), "tier": membership.tier, "reason": exc.code},
            )
            if membership.last_renewal_failure_for != membership.expiry_date:
                if notifications.send_auto_renew_failed_notice(membership, reason=exc.message):
                    membership.last_renewal_failure_for = membership.expiry_date
                    membership.save(update_fields=["last_renewal_failure_for", "updated_at"])
            continue

        renewed += 1
        logger.info(
            "Membership auto-renewed",
            extra={"user_id": str(membership.user_id), "tier": membership.tier},
        )
        notifications.send_renewed_notice(membership)

    return renewed, failed


def process_memberships(*, now=None) -> ProcessResult:
    result = ProcessResult()
    result.notices_sent = send_expiry_notices(now=now)
    result.renewed, result.renewal_failed = process_auto_renewals(now=now)
    return result
