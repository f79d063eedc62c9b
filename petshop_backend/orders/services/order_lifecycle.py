"""
ORDER LIFECYCLE DOMAIN RULES

Allowed transitions:
- processing -> shipped -> delivered
- processing | shipped -> cancelled

Cancellation side effects (same transaction):
- stock restored for every line still linked to a product (RESTORE movements)
- wallet spend refunded as a REFUND (ORDER_REFUND)

Customers may cancel only their own processing orders; staff drive
every transition.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from catalog.services.inventory import restore_stock
from orders.models import Order
from orders.services.exceptions import InvalidOrderTransitionError, OrderNotCancellableError
from wallet.models import WalletTransaction
from wallet.services import ledger

logger = logging.getLogger("orders")

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Order.STATUS_DELIVERED,
    Order.STATUS_CANCELLED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_PROCESSING: {
        Order.STATUS_SHIPPED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_SHIPPED: {
        Order.STATUS_DELIVERED,
        Order.STATUS_CANCELLED,
    },
}

_TIMESTAMP_FIELD = {
    Order.STATUS_SHIPPED: "shipped_at",
    Order.STATUS_DELIVERED: "delivered_at",
    Order.STATUS_CANCELLED: "cancelled_at",
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    if not can_transition(from_status=order.status, to_status=target_status):
        raise InvalidOrderTransitionError(
            f"Order {order.order_number} cannot transition from "
            f"'{order.status}' to '{target_status}'",
            current_status=order.status,
        )


# ============================================================
# TRANSITIONS
# ============================================================


def _release(order: Order, *, performed_by=None) -> None:
    for item in order.items.select_related("product"):
        if item.product_id is None:
            continue
        restore_stock(
            product=item.product,
            quantity=item.quantity,
            reference=order.order_number,
            user=performed_by,
        )

    if order.user_id and Decimal(order.wallet_amount_used) > Decimal("0.00"):
        ledger.refund(
            user=order.user,
            amount=order.wallet_amount_used,
            source=WalletTransaction.SOURCE_ORDER_REFUND,
            description=f"Refund for cancelled order {order.order_number}",
            metadata={"order_number": order.order_number},
            reference=order.order_number,
        )
        order.payment_status = Order.PAYMENT_REFUNDED


@transaction.atomic
def transition_order(*, order: Order, target_status: str, performed_by=None, reason: str = "") -> Order:
    order = Order.objects.select_for_update().get(pk=order.pk)
    validate_transition(order=order, target_status=target_status)

    previous = order.status
    fields = ["status", "updated_at", _TIMESTAMP_FIELD[target_status]]

    if target_status == Order.STATUS_CANCELLED:
        _release(order, performed_by=performed_by)
        order.cancel_reason = (reason or "")[:255]
        fields += ["cancel_reason", "payment_status"]

    if target_status == Order.STATUS_DELIVERED and order.payment_method == Order.PAYMENT_COD:
        order.payment_status = Order.PAYMENT_PAID
        fields.append("payment_status")

    order.status = target_status
    setattr(order, _TIMESTAMP_FIELD[target_status], timezone.now())
    order.save(update_fields=fields)

    logger.info(
        "Order status changed",
        extra={
            "order_number": order.order_number,
            "from_status": previous,
            "to_status": target_status,
            "performed_by": str(getattr(performed_by, "pk", "") or ""),
        },
    )
    return order


def cancel_by_customer(*, order: Order, user, reason: str = "") -> Order:
    if order.status != Order.STATUS_PROCESSING:
        raise OrderNotCancellableError(
            "Only orders that are still processing can be cancelled",
            current_status=order.status,
        )
    return transition_order(order=order, target_status=Order.STATUS_CANCELLED, performed_by=user, reason=reason)
