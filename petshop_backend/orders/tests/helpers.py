# orders/tests/helpers.py

from decimal import Decimal

from catalog.models import Product
from catalog.services.inventory import adjust_stock


def make_product(name, price, stock, **extra):
    product = Product.objects.create(name=name, price=Decimal(price), **extra)
    if stock:
        adjust_stock(product=product, delta=stock, note="opening")
        product.refresh_from_db()
    return product
