# catalog/tests/test_staff_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from catalog.models import Product, StockMovement

User = get_user_model()


class StaffCatalogPermissionTests(TestCase):
    """
    GUARANTEES:
    - Customers and support staff cannot edit the catalog
    - Managers can create products and adjust stock
    - Stock adjustments never go below zero
    """

    def setUp(self):
        self.client = APIClient()
        self.customer = User.objects.create_user(email="c@example.com", password="x")
        self.support = User.objects.create_user(email="s@example.com", password="x", role="support")
        self.manager = User.objects.create_user(email="m@example.com", password="x", role="manager")

    def test_customer_cannot_create_product(self):
        self.client.force_authenticate(user=self.customer)
        res = self.client.post("/api/catalog/manage/products/", {"name": "X", "price": "1.00"})
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_support_cannot_adjust_stock(self):
        product = Product.objects.create(name="Kibble", price=Decimal("5.00"))
        self.client.force_authenticate(user=self.support)
        res = self.client.post(
            f"/api/catalog/manage/products/{product.id}/adjust-stock/",
            {"delta": 5},
        )
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_manager_creates_product_with_initial_stock(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.post(
            "/api/catalog/manage/products/",
            {"name": "Salmon Bites", "price": "7.50", "initial_stock": 12, "tags": ["cat"]},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["slug"], "salmon-bites")
        self.assertEqual(res.data["stock_quantity"], 12)

        product = Product.objects.get(slug="salmon-bites")
        self.assertEqual(StockMovement.objects.filter(product=product).count(), 1)

    def test_duplicate_slug_is_400(self):
        Product.objects.create(name="Taken", price=Decimal("1.00"))
        self.client.force_authenticate(user=self.manager)
        res = self.client.post(
            "/api/catalog/manage/products/",
            {"name": "Other", "slug": "taken", "price": "1.00"},
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_adjust_stock_and_history(self):
        product = Product.objects.create(name="Kibble", price=Decimal("5.00"))
        self.client.force_authenticate(user=self.manager)

        res = self.client.post(
            f"/api/catalog/manage/products/{product.id}/adjust-stock/",
            {"delta": 4, "note": "delivery"},
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["stock_after"], 4)

        res = self.client.post(
            f"/api/catalog/manage/products/{product.id}/adjust-stock/",
            {"delta": -5},
        )
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_STOCK")

        res = self.client.get(f"/api/catalog/manage/products/{product.id}/movements/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)

    def test_adjust_stock_delta_is_bounded(self):
        product = Product.objects.create(name="Kibble", price=Decimal("5.00"))
        self.client.force_authenticate(user=self.manager)

        res = self.client.post(
            f"/api/catalog/manage/products/{product.id}/adjust-stock/",
            {"delta": 10**12},
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(StockMovement.objects.filter(product=product).exists())

    def test_delete_deactivates(self):
        product = Product.objects.create(name="Kibble", price=Decimal("5.00"))
        self.client.force_authenticate(user=self.manager)

        res = self.client.delete(f"/api/catalog/manage/products/{product.id}/")
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)

        product.refresh_from_db()
        self.assertFalse(product.is_active)
