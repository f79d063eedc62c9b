from .public import BrandListView, CategoryTreeView, ProductDetailView, ProductListView
from .recommendations import (
    FrequentlyBoughtTogetherView,
    PersonalizedRecommendationsView,
    SimilarProductsView,
    TrackEventView,
    TrendingProductsView,
)
from .staff import BrandViewSet, CategoryViewSet, ProductViewSet

__all__ = [
    "ProductListView",
    "ProductDetailView",
    "CategoryTreeView",
    "BrandListView",
    "SimilarProductsView",
    "FrequentlyBoughtTogetherView",
    "TrendingProductsView",
    "PersonalizedRecommendationsView",
    "TrackEventView",
    "CategoryViewSet",
    "BrandViewSet",
    "ProductViewSet",
]
