# orders/tests/test_checkout.py

import re
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from cart.models import Cart
from cart.services import cart_service
from catalog.models import ProductEvent, StockMovement
from catalog.services.inventory import adjust_stock
from membership.models import Membership
from membership.services.memberships import grant_membership
from membership.tiers import GOLDEN_PAW
from orders.models import Invoice, Order
from orders.services.checkout_orchestrator import max_wallet_spend
from orders.tests.helpers import make_product
from promotions.models import Coupon
from users.models import Address
from wallet.models import WalletTransaction
from wallet.services import ledger

User = get_user_model()

ADDRESS = "House 12, Road 4, Dhanmondi, Dhaka"


class CheckoutTests(TestCase):
    """
    GUARANTEES:
    - Order totals match the cart arithmetic with catalog prices
    - Stock is validated before any write and decremented with SALE movements
    - Failed checkouts leave stock, coupons and the wallet untouched
    """

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.user = User.objects.create_user(email="buyer@example.com", password="x", phone="01700000000")
        self.client.force_authenticate(user=self.user)
        self.kibble = make_product("Kibble", "20.00", 10)

    def _checkout(self, **body):
        body.setdefault("shipping_address", ADDRESS)
        return self.client.post("/api/orders/checkout/", body)

    def _fund_wallet(self, amount):
        ledger.earn(user=self.user, amount=amount, source=WalletTransaction.SOURCE_STAFF_ADJUSTMENT)

    def test_cod_checkout_writes_order_invoice_and_stock(self):
        cart_service.add_item(user=self.user, product_id=self.kibble.id, quantity=2)

        res = self._checkout()
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)

        order = Order.objects.get()
        self.assertEqual(order.status, Order.STATUS_PROCESSING)
        self.assertEqual(order.payment_method, Order.PAYMENT_COD)
        self.assertEqual(order.payment_status, Order.PAYMENT_PENDING)
        self.assertEqual(order.subtotal, Decimal("40.00"))
        self.assertEqual(order.shipping_fee, Decimal("5.99"))
        self.assertEqual(order.grand_total, Decimal("45.99"))
        self.assertEqual(order.amount_due, Decimal("45.99"))
        self.assertEqual(order.customer_email, "buyer@example.com")
        self.assertEqual(order.customer_phone, "01700000000")

        item = order.items.get()
        self.assertEqual(item.product_name, "Kibble")
        self.assertEqual(item.line_total, Decimal("40.00"))

        self.kibble.refresh_from_db()
        self.assertEqual(self.kibble.stock_quantity, 8)
        movement = StockMovement.objects.get(product=self.kibble, reason=StockMovement.Reason.SALE)
        self.assertEqual(movement.reference, order.order_number)

        invoice = Invoice.objects.get(order=order)
        self.assertRegex(invoice.invoice_number, r"^INV-\d{8}-[0-9A-F]{8}$")
        self.assertEqual(invoice.grand_total, order.grand_total)
        self.assertEqual(res.data["invoice_number"], invoice.invoice_number)

        self.assertTrue(
            ProductEvent.objects.filter(product=self.kibble, event_type=ProductEvent.EventType.PURCHASE).exists()
        )

    def test_cart_is_closed_after_checkout(self):
        cart_service.add_item(user=self.user, product_id=self.kibble.id)
        old_cart = cart_service.get_active_cart(self.user)
        self._checkout()

        old_cart.refresh_from_db()
        self.assertFalse(old_cart.is_active)
        self.assertFalse(old_cart.items.exists())

        fresh = cart_service.get_active_cart(self.user)
        self.assertNotEqual(fresh.pk, old_cart.pk)
        self.assertEqual(Cart.objects.filter(user=self.user, is_active=True).count(), 1)

    def test_empty_cart_rejected(self):
        res = self._checkout()
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "EMPTY_CART")

    def test_insufficient_stock_rejected_without_side_effects(self):
        cart_service.add_item(user=self.user, product_id=self.kibble.id, quantity=5)
        adjust_stock(product=self.kibble, delta=-8, note="damaged")

        res = self._checkout()
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_STOCK")
        self.assertEqual(res.data["error"]["available"], 2)

        self.kibble.refresh_from_db()
        self.assertEqual(self.kibble.stock_quantity, 2)
        self.assertFalse(Order.objects.exists())

    def test_member_exclusive_requires_membership(self):
        exclusive = make_product("Diamond Collar", "30.00", 3, is_member_exclusive=True)
        cart_service.add_item(user=self.user, product_id=exclusive.id)

        res = self._checkout()
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(res.data["error"]["code"], "MEMBERSHIP_REQUIRED")

        grant_membership(user=self.user, tier_key=GOLDEN_PAW)
        res = self._checkout()
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertTrue(Order.objects.get().items.get().is_member_exclusive)
        self.assertEqual(Membership.objects.get(user=self.user).exclusive_products_purchased, 1)

    def test_prices_are_reread_from_catalog(self):
        cart_service.add_item(user=self.user, product_id=self.kibble.id, quantity=2)
        self.kibble.price = Decimal("25.00")
        self.kibble.save()

        self._checkout()
        order = Order.objects.get()
        self.assertEqual(order.subtotal, Decimal("50.00"))
        self.assertEqual(order.items.get().unit_price, Decimal("25.00"))

    def test_coupon_is_consumed(self):
        now = timezone.now()
        coupon = Coupon.objects.create(
            code="PAW5",
            discount_type=Coupon.TYPE_FIXED,
            discount_value=Decimal("5"),
            usage_limit=1,
            valid_from=now - timedelta(days=1),
            valid_until=now + timedelta(days=1),
        )
        cart_service.add_item(user=self.user, product_id=self.kibble.id, quantity=2)
        cart_service.apply_coupon(user=self.user, code="paw5")

        self._checkout()
        order = Order.objects.get()
        self.assertEqual(order.coupon_code, "PAW5")
        self.assertEqual(order.coupon_discount, Decimal("5.00"))
        self.assertEqual(order.grand_total, Decimal("40.99"))

        coupon.refresh_from_db()
        self.assertEqual(coupon.used_count, 1)

    def test_exhausted_coupon_blocks_checkout(self):
        now = timezone.now()
        Coupon.objects.create(
            code="ONCE",
            discount_type=Coupon.TYPE_FIXED,
            discount_value=Decimal("5"),
            usage_limit=1,
            used_count=1,
            valid_from=now - timedelta(days=1),
            valid_until=now + timedelta(days=1),
        )
        cart_service.add_item(user=self.user, product_id=self.kibble.id)
        cart = cart_service.get_active_cart(self.user)
        cart.coupon_code = "ONCE"
        cart.save()

        res = self._checkout()
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "COUPON_USAGE_LIMIT_REACHED")
        self.assertFalse(Order.objects.exists())

    def test_free_delivery_coupon(self):
        now = timezone.now()
        Coupon.objects.create(
            code="FREESHIP-TEST",
            discount_type=Coupon.TYPE_FREE_DELIVERY,
            valid_from=now - timedelta(days=1),
            valid_until=now + timedelta(days=1),
        )
        cart_service.add_item(user=self.user, product_id=self.kibble.id)
        cart_service.apply_coupon(user=self.user, code="FREESHIP-TEST")

        self._checkout()
        order = Order.objects.get()
        self.assertEqual(order.shipping_fee, Decimal("0.00"))
        self.assertEqual(order.grand_total, Decimal("20.00"))

    def test_partial_wallet_spend_is_capped_by_usage_rate(self):
        self._fund_wallet("100.00")
        cart_service.add_item(user=self.user, product_id=self.kibble.id, quantity=2)

        res = self._checkout(wallet_amount="50.00")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

        order = Order.objects.get()
        # 30% of the 40.00 merchandise total
        self.assertEqual(order.wallet_amount_used, Decimal("12.00"))
        self.assertEqual(order.amount_due, Decimal("33.99"))
        self.assertEqual(order.payment_status, Order.PAYMENT_PENDING)

        self.assertEqual(ledger.get_or_create_wallet(self.user).balance, Decimal("88.00"))
        txn = WalletTransaction.objects.get(source=WalletTransaction.SOURCE_ORDER_PAYMENT)
        self.assertEqual(txn.reference, order.order_number)

    def test_wallet_payment_covers_grand_total(self):
        self._fund_wallet("100.00")
        cart_service.add_item(user=self.user, product_id=self.kibble.id, quantity=2)

        res = self._checkout(payment_method="wallet")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

        order = Order.objects.get()
        self.assertEqual(order.payment_status, Order.PAYMENT_PAID)
        self.assertEqual(order.wallet_amount_used, Decimal("45.99"))
        self.assertEqual(order.amount_due, Decimal("0.00"))
        self.assertEqual(ledger.get_or_create_wallet(self.user).balance, Decimal("54.01"))

    def test_wallet_payment_without_coverage_rejected(self):
        self._fund_wallet("10.00")
        cart_service.add_item(user=self.user, product_id=self.kibble.id, quantity=2)

        res = self._checkout(payment_method="wallet")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "WALLET_INSUFFICIENT")

        self.assertEqual(ledger.get_or_create_wallet(self.user).balance, Decimal("10.00"))
        self.kibble.refresh_from_db()
        self.assertEqual(self.kibble.stock_quantity, 10)

    def test_member_discount_and_savings(self):
        grant_membership(user=self.user, tier_key=GOLDEN_PAW)
        cart_service.add_item(user=self.user, product_id=self.kibble.id, quantity=5)

        self._checkout()
        order = Order.objects.get()
        self.assertEqual(order.membership_tier, GOLDEN_PAW)
        self.assertEqual(order.membership_discount, Decimal("10.00"))
        self.assertEqual(order.shipping_fee, Decimal("0.00"))
        self.assertEqual(order.grand_total, Decimal("90.00"))

        self.assertEqual(Membership.objects.get(user=self.user).total_saved, Decimal("10.00"))

    def test_default_address_is_used(self):
        Address.objects.create(
            user=self.user,
            full_name="Rafi Ahmed",
            phone="01811111111",
            line1="Flat 3B",
            city="Chattogram",
            is_default=True,
        )
        cart_service.add_item(user=self.user, product_id=self.kibble.id)

        res = self.client.post("/api/orders/checkout/", {})
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

        order = Order.objects.get()
        self.assertEqual(order.customer_name, "Rafi Ahmed")
        self.assertEqual(order.customer_phone, "01811111111")
        self.assertIn("Chattogram", order.shipping_address)

    def test_missing_address_rejected(self):
        cart_service.add_item(user=self.user, product_id=self.kibble.id)
        res = self.client.post("/api/orders/checkout/", {})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "SHIPPING_ADDRESS_REQUIRED")

    def test_long_profile_name_is_cut_to_order_column(self):
        res = self.client.patch("/api/auth/me/", {"first_name": "A" * 100, "last_name": "B" * 100})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        cart_service.add_item(user=self.user, product_id=self.kibble.id)

        res = self._checkout()
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)

        order = Order.objects.get()
        self.assertEqual(len(order.customer_name), 200)
        self.assertTrue(order.customer_name.startswith("A" * 100 + " B"))
        self.assertEqual(order.invoice.customer_name, order.customer_name)

    def test_foreign_address_is_404(self):
        other = User.objects.create_user(email="other@example.com", password="x")
        address = Address.objects.create(user=other, full_name="X", phone="1", line1="L", city="C")
        cart_service.add_item(user=self.user, product_id=self.kibble.id)

        res = self.client.post("/api/orders/checkout/", {"address_id": str(address.id)})
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "ADDRESS_NOT_FOUND")

    def test_order_numbers_are_prefixed(self):
        cart_service.add_item(user=self.user, product_id=self.kibble.id)
        self._checkout()
        self.assertTrue(re.match(r"^ORD\d{8}-[0-9A-F]{8}$", Order.objects.get().order_number))


class WalletAllowanceTests(TestCase):
    def test_allowance_is_min_of_balance_and_rate(self):
        self.assertEqual(
            max_wallet_spend(merchandise_total="100.00", balance="80.00", usage_rate=Decimal("0.30")),
            Decimal("30.00"),
        )
        self.assertEqual(
            max_wallet_spend(merchandise_total="100.00", balance="12.34", usage_rate=Decimal("0.70")),
            Decimal("12.34"),
        )
        self.assertEqual(
            max_wallet_spend(merchandise_total="0.00", balance="50.00", usage_rate=Decimal("0.50")),
            Decimal("0.00"),
        )
