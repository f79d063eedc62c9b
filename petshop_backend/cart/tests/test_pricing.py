# cart/tests/test_pricing.py

from decimal import Decimal

from django.test import SimpleTestCase

from cart.services.pricing import ShippingRules, compute_totals, membership_discount_for, shipping_fee_for

RULES = ShippingRules(base_fee=Decimal("5.99"), free_threshold=Decimal("100.00"))


class PricingTests(SimpleTestCase):
    def test_empty_cart_has_no_shipping(self):
        totals = compute_totals(lines=[], rules=RULES)
        self.assertEqual(totals.subtotal, Decimal("0.00"))
        self.assertEqual(totals.shipping_fee, Decimal("0.00"))
        self.assertEqual(totals.grand_total, Decimal("0.00"))

    def test_below_threshold_pays_base_fee(self):
        totals = compute_totals(lines=[(Decimal("19.99"), 2)], rules=RULES)
        self.assertEqual(totals.subtotal, Decimal("39.98"))
        self.assertEqual(totals.item_count, 2)
        self.assertEqual(totals.shipping_fee, Decimal("5.99"))
        self.assertEqual(totals.grand_total, Decimal("45.97"))

    def test_threshold_is_inclusive(self):
        self.assertEqual(shipping_fee_for(Decimal("100.00"), item_count=1, rules=RULES), Decimal("0.00"))
        self.assertEqual(shipping_fee_for(Decimal("99.99"), item_count=1, rules=RULES), Decimal("5.99"))

    def test_free_delivery_coupon_waives_shipping(self):
        totals = compute_totals(
            lines=[(Decimal("10.00"), 1)],
            coupon_code="FREESHIP",
            coupon_discount=Decimal("3.00"),
            free_delivery=True,
            rules=RULES,
        )
        self.assertEqual(totals.shipping_fee, Decimal("0.00"))
        self.assertEqual(totals.coupon_discount, Decimal("0.00"))
        self.assertEqual(totals.grand_total, Decimal("10.00"))

    def test_coupon_discount_clamped_to_subtotal(self):
        totals = compute_totals(lines=[(Decimal("8.00"), 1)], coupon_discount=Decimal("20.00"), rules=RULES)
        self.assertEqual(totals.coupon_discount, Decimal("8.00"))
        self.assertEqual(totals.merchandise_total, Decimal("0.00"))
        self.assertEqual(totals.grand_total, Decimal("5.99"))

    def test_membership_and_coupon_stack(self):
        totals = compute_totals(
            lines=[(Decimal("40.00"), 2)],
            coupon_discount=Decimal("8.00"),
            membership_tier="golden_paw",
            membership_rate=Decimal("0.10"),
            rules=RULES,
        )
        self.assertEqual(totals.membership_discount, Decimal("8.00"))
        self.assertEqual(totals.merchandise_total, Decimal("64.00"))
        # shipping is judged on the subtotal (80 < 100)
        self.assertEqual(totals.grand_total, Decimal("69.99"))

    def test_membership_discount_rounds_half_up(self):
        self.assertEqual(membership_discount_for(Decimal("10.10"), Decimal("0.05")), Decimal("0.51"))
