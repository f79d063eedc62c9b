# catalog/tests/test_recommendations.py

from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from catalog.models import Brand, Category, Product, ProductEvent
from catalog.services import recommendations as reco


class RecommendationScoringTests(TestCase):
    """
    GUARANTEES:
    - Similar score: 0.5 base, +0.3 brand, +0.2 price within 20%, +0.1 rating > 4
    - Tag overlap: 0.3 + 0.4 * common / own tags
    - Trending falls back to bestsellers at 0.8
    """

    def setUp(self):
        cache.clear()
        self.cat = Category.objects.create(name="Cat Food")
        self.other_cat = Category.objects.create(name="Toys")
        self.brand = Brand.objects.create(name="Purina")

        self.base = Product.objects.create(
            name="Base Kibble",
            price=Decimal("100.00"),
            category=self.cat,
            brand=self.brand,
            stock_quantity=5,
            tags=["cat", "chicken"],
        )
        self.twin = Product.objects.create(
            name="Twin Kibble",
            price=Decimal("110.00"),
            category=self.cat,
            brand=self.brand,
            rating=Decimal("4.50"),
            stock_quantity=5,
        )
        self.cousin = Product.objects.create(
            name="Cousin Kibble",
            price=Decimal("200.00"),
            category=self.cat,
            stock_quantity=5,
        )
        self.tagged = Product.objects.create(
            name="Chicken Treat",
            price=Decimal("5.00"),
            category=self.other_cat,
            stock_quantity=5,
            tags=["chicken"],
        )
        self.sold_out = Product.objects.create(
            name="Sold Out Kibble",
            price=Decimal("100.00"),
            category=self.cat,
            stock_quantity=0,
        )

    def tearDown(self):
        cache.clear()

    def test_similarity_score_components(self):
        self.assertAlmostEqual(reco.similarity_score(self.base, self.twin), 1.1)
        self.assertAlmostEqual(reco.similarity_score(self.base, self.cousin), 0.5)

    def test_tag_overlap_score(self):
        score, common = reco.tag_overlap_score(["cat", "chicken"], ["chicken"])
        self.assertEqual(common, 1)
        self.assertAlmostEqual(score, 0.5)

    def test_similar_products_ranked_and_in_stock_only(self):
        recs = reco.similar_products(self.base)
        names = [r.product.name for r in recs]

        self.assertEqual(names[0], "Twin Kibble")
        self.assertIn("Cousin Kibble", names)
        self.assertIn("Chicken Treat", names)
        self.assertNotIn("Sold Out Kibble", names)
        self.assertNotIn("Base Kibble", names)

    def test_similar_products_are_cached_and_rehydrated(self):
        reco.similar_products(self.base)

        self.twin.is_active = False
        self.twin.save()

        names = [r.product.name for r in reco.similar_products(self.base)]
        self.assertNotIn("Twin Kibble", names)

    def test_trending_falls_back_to_bestsellers(self):
        self.cousin.is_bestseller = True
        self.cousin.save()

        recs = reco.trending_products()
        self.assertEqual([r.product.name for r in recs], ["Cousin Kibble"])
        self.assertEqual(recs[0].score, 0.8)

    def test_trending_scores_recent_activity(self):
        for _ in range(10):
            ProductEvent.objects.create(product=self.twin, event_type="view")
        ProductEvent.objects.create(product=self.twin, event_type="purchase")
        ProductEvent.objects.create(product=self.cousin, event_type="view")

        recs = reco.trending_products()
        self.assertEqual(recs[0].product, self.twin)
        # 11 events * 0.3 + 1 purchase * 0.7 = 4.0 -> / 100
        self.assertAlmostEqual(recs[0].score, 0.04)

    def test_frequently_bought_falls_back_to_similar(self):
        recs = reco.frequently_bought_together(self.base)
        self.assertEqual(recs[0].product, self.twin)

    def test_personalized_uses_browsing_history(self):
        ProductEvent.objects.create(product=self.base, event_type="view", session_id="abc")

        recs = reco.personalized_recommendations(session_id="abc")
        names = {r.product.name for r in recs}
        self.assertIn("Twin Kibble", names)
        self.assertNotIn("Chicken Treat", names)


class RecommendationApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.product = Product.objects.create(name="Kibble", price=Decimal("10.00"), stock_quantity=3)

    def tearDown(self):
        cache.clear()

    def test_track_event_endpoint(self):
        res = self.client.post(
            "/api/catalog/events/",
            {"product": str(self.product.id), "event_type": "add_to_cart"},
            HTTP_X_SESSION_ID="s-9",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertTrue(
            ProductEvent.objects.filter(product=self.product, event_type="add_to_cart", session_id="s-9").exists()
        )

    def test_invalid_event_type_rejected(self):
        res = self.client.post(
            "/api/catalog/events/",
            {"product": str(self.product.id), "event_type": "teleport"},
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_public_recommendation_endpoints(self):
        for url in (
            "/api/catalog/recommendations/trending/",
            "/api/catalog/recommendations/for-you/",
            f"/api/catalog/recommendations/similar/{self.product.id}/",
            f"/api/catalog/recommendations/frequently-bought/{self.product.id}/",
        ):
            res = self.client.get(url)
            self.assertEqual(res.status_code, status.HTTP_200_OK, url)
            self.assertIsInstance(res.data, list)
