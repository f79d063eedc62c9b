# promotions/tests/test_coupons.py

from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from promotions.models import Coupon
from promotions.services.coupons import (
    CouponExpiredError,
    CouponMinimumOrderError,
    CouponNotFoundError,
    CouponRedemptionConflict,
    CouponUsageLimitError,
    compute_discount,
    redeem_coupon,
    validate_coupon,
)

User = get_user_model()


def make_coupon(**overrides):
    now = timezone.now()
    data = {
        "code": "SAVE10",
        "discount_type": Coupon.TYPE_PERCENTAGE,
        "discount_value": Decimal("10"),
        "valid_from": now - timedelta(days=1),
        "valid_until": now + timedelta(days=30),
    }
    data.update(overrides)
    return Coupon.objects.create(**data)


class CouponRuleTests(TestCase):
    """
    GUARANTEES:
    - Codes are stored upper-case and matched case-insensitively
    - Validation order: active -> window -> usage limit -> minimum order
    - Percentage discounts round half-up to whole units and respect the cap
    """

    def test_code_is_uppercased(self):
        coupon = make_coupon(code="  meow5 ")
        self.assertEqual(coupon.code, "MEOW5")
        self.assertEqual(validate_coupon("Meow5", subtotal="50").pk, coupon.pk)

    def test_unknown_and_inactive(self):
        make_coupon(is_active=False)
        with self.assertRaises(CouponNotFoundError):
            validate_coupon("NOPE", subtotal="50")
        with self.assertRaises(CouponNotFoundError):
            validate_coupon("SAVE10", subtotal="50")

    def test_window_checked_before_usage_limit(self):
        make_coupon(
            valid_from=timezone.now() + timedelta(days=1),
            valid_until=timezone.now() + timedelta(days=2),
            usage_limit=1,
            used_count=1,
        )
        with self.assertRaises(CouponExpiredError):
            validate_coupon("SAVE10", subtotal="50")

    def test_usage_limit_checked_before_minimum(self):
        make_coupon(usage_limit=2, used_count=2, min_order_amount=Decimal("100"))
        with self.assertRaises(CouponUsageLimitError):
            validate_coupon("SAVE10", subtotal="10")

    def test_minimum_order(self):
        make_coupon(min_order_amount=Decimal("100"))
        with self.assertRaises(CouponMinimumOrderError):
            validate_coupon("SAVE10", subtotal="99.99")
        self.assertTrue(validate_coupon("SAVE10", subtotal="100"))

    def test_percentage_rounds_half_up_to_whole_units(self):
        coupon = make_coupon(discount_value=Decimal("10"))
        self.assertEqual(compute_discount(coupon, Decimal("45.00")), Decimal("5.00"))  # 4.5 -> 5
        self.assertEqual(compute_discount(coupon, Decimal("44.90")), Decimal("4.00"))  # 4.49 -> 4

    def test_percentage_is_capped(self):
        coupon = make_coupon(discount_value=Decimal("50"), max_discount_amount=Decimal("20"))
        self.assertEqual(compute_discount(coupon, Decimal("200.00")), Decimal("20.00"))

    def test_fixed_and_free_delivery(self):
        fixed = make_coupon(code="FLAT5", discount_type=Coupon.TYPE_FIXED, discount_value=Decimal("5"))
        free = make_coupon(code="SHIPFREE", discount_type=Coupon.TYPE_FREE_DELIVERY, discount_value=Decimal("0"))
        self.assertEqual(compute_discount(fixed, Decimal("3.00")), Decimal("5.00"))
        self.assertEqual(compute_discount(free, Decimal("80.00")), Decimal("0.00"))

    def test_redeem_consumes_one_use_then_conflicts(self):
        make_coupon(usage_limit=1)

        coupon, discount = redeem_coupon("save10", subtotal="100")
        self.assertEqual(coupon.used_count, 1)
        self.assertEqual(discount, Decimal("10.00"))

        with self.assertRaises(CouponUsageLimitError):
            redeem_coupon("SAVE10", subtotal="100")

    def test_conditional_update_detects_race(self):
        coupon = make_coupon(usage_limit=1)
        # Another checkout took the last use after our read.
        Coupon.objects.filter(pk=coupon.pk).update(used_count=1)

        stale = Coupon.objects.get(pk=coupon.pk)
        stale.used_count = 0

        with patch("promotions.services.coupons.find_coupon", return_value=stale):
            with self.assertRaises(CouponRedemptionConflict):
                redeem_coupon("SAVE10", subtotal="100")

    def test_personal_coupon_only_for_owner_and_single_use(self):
        owner = User.objects.create_user(email="owner@example.com", password="x")
        other = User.objects.create_user(email="other@example.com", password="x")
        make_coupon(code="FD-OWNER", discount_type=Coupon.TYPE_FREE_DELIVERY, issued_to=owner, usage_limit=1)

        with self.assertRaises(CouponNotFoundError):
            validate_coupon("FD-OWNER", subtotal="10", user=other)

        coupon, _ = redeem_coupon("FD-OWNER", subtotal="10", user=owner)
        self.assertFalse(coupon.is_active)


class CouponApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_public_validate(self):
        make_coupon(max_discount_amount=Decimal("3"))

        res = self.client.post("/api/promotions/coupons/validate/", {"code": "save10", "order_amount": "50.00"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["discount_amount"], "3.00")
        self.assertFalse(res.data["free_delivery"])

    def test_public_validate_error_shape(self):
        res = self.client.post("/api/promotions/coupons/validate/", {"code": "NOPE", "order_amount": "50.00"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "COUPON_INVALID")

    def test_staff_crud_requires_capability(self):
        customer = User.objects.create_user(email="c@example.com", password="x")
        manager = User.objects.create_user(email="m@example.com", password="x", role="manager")
        payload = {
            "code": "new20",
            "discount_type": "percentage",
            "discount_value": "20",
            "valid_from": timezone.now().isoformat(),
            "valid_until": (timezone.now() + timedelta(days=5)).isoformat(),
        }

        self.client.force_authenticate(user=customer)
        res = self.client.post("/api/promotions/coupons/", payload)
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=manager)
        res = self.client.post("/api/promotions/coupons/", payload)
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["code"], "NEW20")

        res = self.client.post("/api/promotions/coupons/", payload)
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
