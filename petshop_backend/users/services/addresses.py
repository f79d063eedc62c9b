"""
PATH: users/services/addresses.py

ADDRESS BOOK SERVICE

Default-address rules:
- The first address a user saves becomes the default.
- Setting a new default clears the previous one.
- Deleting the default promotes the most recently created remaining address.
"""

from __future__ import annotations

import logging

from django.db import transaction

from users.models import Address

logger = logging.getLogger("users")


def _clear_default(user, *, exclude_id=None) -> None:
    qs = Address.objects.select_for_update().filter(user=user, is_default=True)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    qs.update(is_default=False)


@transaction.atomic
def create_address(*, user, data: dict) -> Address:
    has_any = Address.objects.select_for_update().filter(user=user).exists()
    make_default = bool(data.pop("is_default", False)) or not has_any

    if make_default:
        _clear_default(user)

    address = Address.objects.create(user=user, is_default=make_default, **data)
    logger.info(
        "Address created",
        extra={"user_id": str(user.pk), "address_id": str(address.pk), "is_default": make_default},
    )
    return address


@transaction.atomic
def update_address(*, address: Address, data: dict) -> Address:
    make_default = data.pop("is_default", None)

    for field, value in data.items():
        setattr(address, field, value)

    if make_default is True and not address.is_default:
        _clear_default(address.user, exclude_id=address.pk)
        address.is_default = True

    # Un-setting the only default is ignored: one default must remain.
    address.save()
    return address


@transaction.atomic
def set_default_address(*, address: Address) -> Address:
    _clear_default(address.user, exclude_id=address.pk)
    if not address.is_default:
        address.is_default = True
        address.save(update_fields=["is_default", "updated_at"])
    return address


@transaction.atomic
def delete_address(*, address: Address) -> None:
    user = address.user
    was_default = address.is_default
    address.delete()

    if not was_default:
        return

    replacement = (
        Address.objects.select_for_update()
        .filter(user=user)
        .order_by("-created_at")
        .first()
    )
    if replacement is not None:
        replacement.is_default = True
        replacement.save(update_fields=["is_default", "updated_at"])


def default_address_for(user):
    return Address.objects.filter(user=user, is_default=True).first()
