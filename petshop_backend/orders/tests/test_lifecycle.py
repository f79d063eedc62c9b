# orders/tests/test_lifecycle.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from cart.services import cart_service
from catalog.models import StockMovement
from catalog.services.recommendations import frequently_bought_together
from orders.models import Order
from orders.services.checkout_orchestrator import checkout_cart
from orders.services.exceptions import InvalidOrderTransitionError
from orders.services.order_lifecycle import can_transition, transition_order
from orders.tests.helpers import make_product
from permissions.roles import ROLE_SUPPORT
from wallet.models import WalletTransaction
from wallet.services import ledger

User = get_user_model()

ADDRESS = "Road 7, Banani, Dhaka"


def place_order(user, *lines, **kwargs):
    for product, qty in lines:
        cart_service.add_item(user=user, product_id=product.id, quantity=qty)
    return checkout_cart(user=user, customer={"shipping_address": ADDRESS}, **kwargs)


class TransitionRuleTests(TestCase):
    def test_allowed_and_terminal(self):
        self.assertTrue(can_transition(from_status="processing", to_status="shipped"))
        self.assertTrue(can_transition(from_status="shipped", to_status="delivered"))
        self.assertTrue(can_transition(from_status="shipped", to_status="cancelled"))
        self.assertFalse(can_transition(from_status="processing", to_status="delivered"))
        self.assertFalse(can_transition(from_status="delivered", to_status="cancelled"))
        self.assertFalse(can_transition(from_status="cancelled", to_status="processing"))


class OrderLifecycleTests(TestCase):
    def setUp(self):
        cache.clear()
        self.user = User.objects.create_user(email="life@example.com", password="x")
        self.treats = make_product("Chicken Treats", "10.00", 6)

    def test_ship_then_deliver_marks_cod_paid(self):
        order = place_order(self.user, (self.treats, 1))

        order = transition_order(order=order, target_status=Order.STATUS_SHIPPED)
        self.assertIsNotNone(order.shipped_at)

        order = transition_order(order=order, target_status=Order.STATUS_DELIVERED)
        self.assertIsNotNone(order.delivered_at)
        self.assertEqual(order.payment_status, Order.PAYMENT_PAID)

        with self.assertRaises(InvalidOrderTransitionError):
            transition_order(order=order, target_status=Order.STATUS_CANCELLED)

    def test_cancel_restores_stock_and_refunds_wallet(self):
        ledger.earn(user=self.user, amount="50.00", source=WalletTransaction.SOURCE_STAFF_ADJUSTMENT)
        order = place_order(self.user, (self.treats, 4), wallet_amount="100")
        # 30% of 40.00
        self.assertEqual(order.wallet_amount_used, Decimal("12.00"))
        self.assertEqual(ledger.get_or_create_wallet(self.user).balance, Decimal("38.00"))

        order = transition_order(order=order, target_status=Order.STATUS_CANCELLED, reason="changed mind")
        self.assertEqual(order.status, Order.STATUS_CANCELLED)
        self.assertEqual(order.payment_status, Order.PAYMENT_REFUNDED)
        self.assertEqual(order.cancel_reason, "changed mind")

        self.treats.refresh_from_db()
        self.assertEqual(self.treats.stock_quantity, 6)
        self.assertTrue(
            StockMovement.objects.filter(reason=StockMovement.Reason.RESTORE, reference=order.order_number).exists()
        )

        refund = WalletTransaction.objects.get(type=WalletTransaction.Type.REFUND)
        self.assertEqual(refund.source, WalletTransaction.SOURCE_ORDER_REFUND)
        self.assertEqual(refund.amount, Decimal("12.00"))
        self.assertEqual(ledger.get_or_create_wallet(self.user).balance, Decimal("50.00"))

    def test_cancelled_orders_are_ignored_by_bought_together(self):
        bowl = make_product("Steel Bowl", "8.00", 10)
        mat = make_product("Feeding Mat", "6.00", 10)

        place_order(self.user, (self.treats, 1), (bowl, 1))
        place_order(self.user, (self.treats, 1), (bowl, 1))
        cancelled = place_order(self.user, (self.treats, 1), (mat, 1))
        transition_order(order=cancelled, target_status=Order.STATUS_CANCELLED)

        recs = frequently_bought_together(self.treats)
        self.assertEqual(recs[0].product, bowl)
        self.assertEqual(recs[0].score, 1.0)
        self.assertNotIn(mat, [r.product for r in recs if r.reason.startswith("Frequently")])


class OrderApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.user = User.objects.create_user(email="api@example.com", password="x")
        self.treats = make_product("Salmon Bites", "12.00", 5)
        self.order = place_order(self.user, (self.treats, 2))

    def test_my_orders_and_detail(self):
        self.client.force_authenticate(user=self.user)
        res = self.client.get("/api/orders/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["order_number"], self.order.order_number)

        res = self.client.get(f"/api/orders/{self.order.id}/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(len(res.data["items"]), 1)

    def test_other_users_order_is_404(self):
        other = User.objects.create_user(email="other@example.com", password="x")
        self.client.force_authenticate(user=other)
        res = self.client.get(f"/api/orders/{self.order.id}/")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_invoices(self):
        self.client.force_authenticate(user=self.user)
        res = self.client.get("/api/orders/invoices/")
        self.assertEqual(res.data["count"], 1)
        invoice = res.data["results"][0]
        self.assertEqual(invoice["order_number"], self.order.order_number)
        self.assertEqual(invoice["grand_total"], "29.99")

        res = self.client.get(f"/api/orders/invoices/{invoice['id']}/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["items"][0]["quantity"], 2)

    def test_customer_cancel_only_while_processing(self):
        self.client.force_authenticate(user=self.user)
        transition_order(order=self.order, target_status=Order.STATUS_SHIPPED)

        res = self.client.post(f"/api/orders/{self.order.id}/cancel/", {})
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "ORDER_NOT_CANCELLABLE")

    def test_customer_cancel(self):
        self.client.force_authenticate(user=self.user)
        res = self.client.post(f"/api/orders/{self.order.id}/cancel/", {"reason": "duplicate"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "cancelled")

    def test_public_tracking(self):
        res = self.client.get(
            "/api/orders/track/",
            {"order_number": self.order.order_number.lower(), "email": "API@example.com"},
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "processing")
        self.assertNotIn("shipping_address", res.data)

        res = self.client.get(
            "/api/orders/track/",
            {"order_number": self.order.order_number, "email": "someone@example.com"},
        )
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_staff_status_update_requires_capability(self):
        self.client.force_authenticate(user=self.user)
        res = self.client.patch(f"/api/orders/manage/{self.order.id}/status/", {"status": "shipped"})
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

        support = User.objects.create_user(email="support@example.com", password="x", role=ROLE_SUPPORT)
        self.client.force_authenticate(user=support)

        res = self.client.get("/api/orders/manage/", {"status": "processing"})
        self.assertEqual(res.data["count"], 1)

        res = self.client.patch(f"/api/orders/manage/{self.order.id}/status/", {"status": "delivered"})
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "INVALID_STATUS_TRANSITION")

        res = self.client.patch(f"/api/orders/manage/{self.order.id}/status/", {"status": "shipped"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "shipped")
