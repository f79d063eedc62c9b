# catalog/services/inventory.py

"""
======================================================
PATH: catalog/services/inventory.py
======================================================
INVENTORY CORE SERVICES

Purpose:
- Decrement stock for a sale (SALE movement)
- Restore stock for a cancelled order (RESTORE movement)
- Manual staff adjustment (ADJUSTMENT movement)

Rules:
- Every stock change locks the product row (select_for_update)
- Every stock change writes exactly one immutable StockMovement
- Stock can never go negative
"""

from __future__ import annotations

import logging

from django.db import transaction

from catalog.models import Product, StockMovement
from catalog.services.exceptions import InsufficientStockError, InvalidQuantityError

logger = logging.getLogger("catalog")


def _to_int(value, *, field_name="quantity") -> int:
    if value is None or value == "" or isinstance(value, bool):
        raise InvalidQuantityError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidQuantityError(f"{field_name} must be an integer")


def _require_positive(value, *, field_name="quantity") -> int:
    v = _to_int(value, field_name=field_name)
    if v <= 0:
        raise InvalidQuantityError(f"{field_name} must be greater than zero")
    return v


def _lock(product) -> Product:
    return Product.objects.select_for_update().get(pk=product.pk)


def _apply(*, product: Product, change: int, reason: str, reference: str = "", note: str = "", user=None) -> StockMovement:
    before = int(product.stock_quantity)
    after = before + change
    if after < 0:
        raise InsufficientStockError(product, requested=-change, available=before)

    product.stock_quantity = after
    product.save(update_fields=["stock_quantity", "updated_at"])

    movement = StockMovement.objects.create(
        product=product,
        reason=reason,
        quantity_change=change,
        stock_before=before,
        stock_after=after,
        reference=(reference or "")[:64],
        note=(note or "")[:255],
        performed_by=user,
    )

    logger.info(
        "Stock movement recorded",
        extra={
            "product_id": str(product.pk),
            "reason": reason,
            "quantity_change": change,
            "stock_after": after,
            "reference": reference,
        },
    )
    return movement


@transaction.atomic
def decrement_stock(*, product, quantity, reference: str = "", user=None) -> StockMovement:
    qty = _require_positive(quantity)
    locked = _lock(product)
    return _apply(
        product=locked,
        change=-qty,
        reason=StockMovement.Reason.SALE,
        reference=reference,
        user=user,
    )


@transaction.atomic
def restore_stock(*, product, quantity, reference: str = "", user=None) -> StockMovement:
    qty = _require_positive(quantity)
    locked = _lock(product)
    return _apply(
        product=locked,
        change=qty,
        reason=StockMovement.Reason.RESTORE,
        reference=reference,
        user=user,
    )


@transaction.atomic
def adjust_stock(*, product, delta, note: str = "", user=None) -> StockMovement:
    """
    Staff manual correction (stock count, damaged goods, new delivery).
    delta is signed and may not be zero.
    """
    change = _to_int(delta, field_name="delta")
    if change == 0:
        raise InvalidQuantityError("delta must be non-zero")

    locked = _lock(product)
    return _apply(
        product=locked,
        change=change,
        reason=StockMovement.Reason.ADJUSTMENT,
        note=note,
        user=user,
    )
