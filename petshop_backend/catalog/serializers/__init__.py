from .category import BrandSerializer, CategorySerializer, CategoryTreeSerializer
from .product import (
    ProductSerializer,
    ProductWriteSerializer,
    RecommendationSerializer,
    StockAdjustSerializer,
    StockMovementSerializer,
    TrackEventSerializer,
)

__all__ = [
    "CategorySerializer",
    "CategoryTreeSerializer",
    "BrandSerializer",
    "ProductSerializer",
    "ProductWriteSerializer",
    "StockAdjustSerializer",
    "StockMovementSerializer",
    "TrackEventSerializer",
    "RecommendationSerializer",
]
