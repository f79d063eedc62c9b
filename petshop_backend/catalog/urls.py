# catalog/urls.py

"""
CATALOG URLS (/api/catalog/)

Public:
- products/, products/<id-or-slug>/, categories/, brands/
- recommendations/..., events/

Staff (router):
- manage/categories/, manage/brands/, manage/products/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from catalog.views import (
    BrandListView,
    BrandViewSet,
    CategoryTreeView,
    CategoryViewSet,
    FrequentlyBoughtTogetherView,
    PersonalizedRecommendationsView,
    ProductDetailView,
    ProductListView,
    ProductViewSet,
    SimilarProductsView,
    TrackEventView,
    TrendingProductsView,
)

app_name = "catalog"

router = DefaultRouter()

router.register(r"categories", CategoryViewSet, basename="manage-categories")
router.register(r"brands", BrandViewSet, basename="manage-brands")
router.register(r"products", ProductViewSet, basename="manage-products")

urlpatterns = [
    # ---------------- PUBLIC ----------------
    path("products/", ProductListView.as_view(), name="product-list"),
    path("products/<str:key>/", ProductDetailView.as_view(), name="product-detail"),
    path("categories/", CategoryTreeView.as_view(), name="category-tree"),
    path("brands/", BrandListView.as_view(), name="brand-list"),
    path("recommendations/trending/", TrendingProductsView.as_view(), name="reco-trending"),
    path("recommendations/for-you/", PersonalizedRecommendationsView.as_view(), name="reco-personalized"),
    path("recommendations/similar/<uuid:product_id>/", SimilarProductsView.as_view(), name="reco-similar"),
    path(
        "recommendations/frequently-bought/<uuid:product_id>/",
        FrequentlyBoughtTogetherView.as_view(),
        name="reco-frequently-bought",
    ),
    path("events/", TrackEventView.as_view(), name="track-event"),
    # ---------------- STAFF ----------------
    path("manage/", include(router.urls)),
]
