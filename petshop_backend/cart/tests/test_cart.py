# cart/tests/test_cart.py

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from cart.models import CartItem, WishlistItem
from catalog.models import Product, ProductEvent
from catalog.services.inventory import adjust_stock
from membership.services.memberships import grant_membership
from membership.tiers import SILVER_PAW
from promotions.models import Coupon

User = get_user_model()


def make_product(name, price, stock):
    product = Product.objects.create(name=name, price=Decimal(price))
    if stock:
        adjust_stock(product=product, delta=stock, note="opening")
        product.refresh_from_db()
    return product


class CartApiTests(TestCase):
    """
    GUARANTEES:
    - Lines are capped at available stock
    - Unit price snapshot refreshes on every add
    - Quantity <= 0 removes a line
    - Coupons validate against the current subtotal; clearing drops the coupon
    """

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="cart@example.com", password="x")
        self.client.force_authenticate(user=self.user)
        self.kibble = make_product("Kibble", "20.00", 5)
        self.toy = make_product("Mouse Toy", "4.50", 0)

    def _add(self, product, quantity=None):
        body = {"product": str(product.id)}
        if quantity is not None:
            body["quantity"] = quantity
        return self.client.post("/api/cart/items/", body)

    def test_add_defaults_to_one_and_increments(self):
        res = self._add(self.kibble)
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["items"][0]["quantity"], 1)

        res = self._add(self.kibble, 2)
        self.assertEqual(res.data["items"][0]["quantity"], 3)
        self.assertEqual(res.data["totals"]["subtotal"], "60.00")
        self.assertEqual(res.data["totals"]["shipping_fee"], "5.99")
        self.assertEqual(res.data["totals"]["grand_total"], "65.99")

    def test_add_is_capped_at_stock(self):
        res = self._add(self.kibble, 9)
        self.assertEqual(res.data["items"][0]["quantity"], 5)

    def test_out_of_stock_rejected(self):
        res = self._add(self.toy)
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "OUT_OF_STOCK")

    def test_inactive_product_rejected(self):
        self.kibble.is_active = False
        self.kibble.save()
        res = self._add(self.kibble)
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "PRODUCT_UNAVAILABLE")

    def test_price_snapshot_refreshes_on_add(self):
        self._add(self.kibble)
        self.kibble.price = Decimal("18.00")
        self.kibble.save()

        res = self._add(self.kibble)
        self.assertEqual(res.data["items"][0]["unit_price"], "18.00")
        self.assertEqual(res.data["totals"]["subtotal"], "36.00")

    def test_update_and_remove(self):
        self._add(self.kibble)
        item = CartItem.objects.get()

        res = self.client.patch(f"/api/cart/items/{item.id}/", {"quantity": 50})
        self.assertEqual(res.data["items"][0]["quantity"], 5)

        res = self.client.patch(f"/api/cart/items/{item.id}/", {"quantity": 0})
        self.assertEqual(res.data["items"], [])
        self.assertEqual(res.data["totals"]["shipping_fee"], "0.00")

    def test_foreign_item_is_404(self):
        other = User.objects.create_user(email="o@example.com", password="x")
        self.client.force_authenticate(user=other)
        self._add(self.kibble)
        item = CartItem.objects.get()

        self.client.force_authenticate(user=self.user)
        res = self.client.delete(f"/api/cart/items/{item.id}/")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_apply_coupon_and_clear(self):
        now = timezone.now()
        Coupon.objects.create(
            code="SAVE10",
            discount_type=Coupon.TYPE_PERCENTAGE,
            discount_value=Decimal("10"),
            min_order_amount=Decimal("30"),
            valid_from=now - timedelta(days=1),
            valid_until=now + timedelta(days=1),
        )
        self._add(self.kibble)

        res = self.client.post("/api/cart/coupon/", {"code": "save10"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "COUPON_MIN_ORDER_NOT_MET")

        self._add(self.kibble)
        res = self.client.post("/api/cart/coupon/", {"code": "save10"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["coupon_code"], "SAVE10")
        self.assertEqual(res.data["totals"]["coupon_discount"], "4.00")

        res = self.client.delete("/api/cart/")
        self.assertEqual(res.data["items"], [])
        self.assertIsNone(res.data["coupon_code"])

    def test_stale_coupon_reported(self):
        self._add(self.kibble, 2)
        now = timezone.now()
        coupon = Coupon.objects.create(
            code="FIVE",
            discount_type=Coupon.TYPE_FIXED,
            discount_value=Decimal("5"),
            valid_from=now - timedelta(days=1),
            valid_until=now + timedelta(days=1),
        )
        self.client.post("/api/cart/coupon/", {"code": "FIVE"})
        coupon.is_active = False
        coupon.save()

        res = self.client.get("/api/cart/")
        self.assertEqual(res.data["totals"]["coupon_error"]["code"], "COUPON_INVALID")
        self.assertEqual(res.data["totals"]["coupon_discount"], "0.00")

    def test_member_discount_in_totals(self):
        grant_membership(user=self.user, tier_key=SILVER_PAW)
        self._add(self.kibble, 5)

        res = self.client.get("/api/cart/")
        self.assertEqual(res.data["totals"]["membership_tier"], SILVER_PAW)
        self.assertEqual(res.data["totals"]["membership_discount"], "5.00")
        self.assertEqual(res.data["totals"]["grand_total"], "95.00")

    def test_add_tracks_event(self):
        self._add(self.kibble)
        self.assertTrue(
            ProductEvent.objects.filter(
                product=self.kibble, user=self.user, event_type=ProductEvent.EventType.ADD_TO_CART
            ).exists()
        )


class WishlistApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="wish@example.com", password="x")
        self.client.force_authenticate(user=self.user)
        self.product = make_product("Cat Tree", "55.00", 3)

    def test_add_is_idempotent(self):
        res = self.client.post("/api/cart/wishlist/", {"product": str(self.product.id)})
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        res = self.client.post("/api/cart/wishlist/", {"product": str(self.product.id)})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(WishlistItem.objects.count(), 1)

        res = self.client.get("/api/cart/wishlist/")
        self.assertEqual(len(res.data), 1)

    def test_remove(self):
        self.client.post("/api/cart/wishlist/", {"product": str(self.product.id)})
        res = self.client.delete(f"/api/cart/wishlist/{self.product.id}/")
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        res = self.client.delete(f"/api/cart/wishlist/{self.product.id}/")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_move_to_cart(self):
        self.client.post("/api/cart/wishlist/", {"product": str(self.product.id)})
        res = self.client.post(f"/api/cart/wishlist/{self.product.id}/move-to-cart/", {"quantity": 2})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["items"][0]["quantity"], 2)
        self.assertFalse(WishlistItem.objects.exists())
