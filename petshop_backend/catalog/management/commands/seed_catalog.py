from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from catalog.models import Brand, Category, Product
from catalog.services.inventory import adjust_stock


CATEGORIES = [
    ("Cat Food", None),
    ("Dry Food", "Cat Food"),
    ("Wet Food", "Cat Food"),
    ("Cat Toys", None),
    ("Cat Litter", None),
    ("Dog Food", None),
    ("Dog Accessories", None),
]

BRANDS = ["Royal Canin", "Whiskas", "Purina", "Reflex Plus", "Me-O"]

PRODUCTS = [
    # name, category, brand, price, original price, stock, tags, flags
    ("Reflex Plus Adult Cat Food Chicken 1.5kg", "Dry Food", "Reflex Plus", "18.50", "21.00", 40, ["cat", "adult", "chicken"], {"is_bestseller": True, "is_on_sale": True}),
    ("Royal Canin Kitten 2kg", "Dry Food", "Royal Canin", "32.00", None, 25, ["cat", "kitten"], {"is_bestseller": True}),
    ("Whiskas Tuna Pouch 85g", "Wet Food", "Whiskas", "1.20", None, 300, ["cat", "tuna", "wet"], {}),
    ("Me-O Seafood Wet Food 80g", "Wet Food", "Me-O", "0.95", None, 250, ["cat", "seafood", "wet"], {"is_new": True}),
    ("Feather Teaser Wand", "Cat Toys", None, "4.50", None, 60, ["cat", "toy"], {}),
    ("Clumping Bentonite Litter 10L", "Cat Litter", None, "9.90", "11.50", 8, ["cat", "litter"], {"is_on_sale": True}),
    ("Purina Adult Dog Chow 3kg", "Dog Food", "Purina", "27.00", None, 20, ["dog", "adult"], {}),
    ("Reflective Dog Collar", "Dog Accessories", None, "6.75", None, 35, ["dog", "collar"], {}),
    ("Premium Grain-Free Salmon 2kg (Members)", "Dry Food", "Royal Canin", "44.00", None, 15, ["cat", "salmon", "grain-free"], {"is_member_exclusive": True}),
]


class Command(BaseCommand):
    help = "Seed categories, brands and demo products (idempotent by slug)"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write(self.style.WARNING("Seeding catalog..."))

        # -------------------------------
        # CATEGORIES
        # -------------------------------
        cats = {}
        for name, parent_name in CATEGORIES:
            obj = Category.objects.filter(name=name).first()
            if obj is None:
                obj = Category.objects.create(name=name, parent=cats.get(parent_name))
            cats[name] = obj

        # -------------------------------
        # BRANDS
        # -------------------------------
        brands = {}
        for name in BRANDS:
            obj = Brand.objects.filter(name=name).first() or Brand.objects.create(name=name)
            brands[name] = obj

        # -------------------------------
        # PRODUCTS (+ opening stock)
        # -------------------------------
        created_count = 0
        for name, cat, brand, price, original, stock, tags, flags in PRODUCTS:
            if Product.objects.filter(name=name).exists():
                continue

            product = Product.objects.create(
                name=name,
                category=cats[cat],
                brand=brands.get(brand),
                price=Decimal(price),
                original_price=Decimal(original) if original else None,
                tags=tags,
                rating=Decimal("4.50"),
                **flags,
            )
            adjust_stock(product=product, delta=stock, note="Seed opening stock")
            created_count += 1

        self.stdout.write(
            self.style.SUCCESS(f"Catalog seeded: {created_count} new product(s).")
        )
