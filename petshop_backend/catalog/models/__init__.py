"""
PATH: catalog/models/__init__.py

Catalog models export surface.
"""

from .category import Brand, Category
from .product import Product
from .product_event import ProductEvent
from .stock_movement import StockMovement

__all__ = [
    "Category",
    "Brand",
    "Product",
    "StockMovement",
    "ProductEvent",
]
