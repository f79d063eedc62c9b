from django.core.management.base import BaseCommand
from django.db import transaction

from content.models import Page

PAGES = {
    "shipping-policy": (
        "Shipping Policy",
        "Orders are dispatched within 1-2 business days. Delivery is free for orders "
        "above the free-shipping threshold; a flat fee applies otherwise.",
    ),
    "return-policy": (
        "Return Policy",
        "Unopened items can be returned within 7 days of delivery. Opened food and "
        "litter cannot be returned unless damaged on arrival.",
    ),
    "privacy-policy": (
        "Privacy Policy",
        "We store only the details needed to deliver your orders and never sell them.",
    ),
    "terms-of-service": (
        "Terms of Service",
        "By placing an order you agree to our pricing, delivery and membership terms.",
    ),
    "quality-guarantee": (
        "Quality Guarantee",
        "Every product is sourced from authorised distributors and checked before dispatch.",
    ),
}


class Command(BaseCommand):
    help = "Create the default policy pages (existing pages are left untouched)"

    @transaction.atomic
    def handle(self, *args, **options):
        created = 0
        for slug, (title, body) in PAGES.items():
            _, was_created = Page.objects.get_or_create(slug=slug, defaults={"title": title, "body": body})
            if was_created:
                created += 1
                self.stdout.write(f"  + {slug}")

        self.stdout.write(self.style.SUCCESS(f"Pages seeded ({created} created, {len(PAGES) - created} kept)"))
