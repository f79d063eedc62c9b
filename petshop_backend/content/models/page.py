# content/models/page.py

import uuid

from django.db import models

# Slugs the storefront footer links to.
POLICY_SLUGS = [
    "shipping-policy",
    "return-policy",
    "privacy-policy",
    "terms-of-service",
    "quality-guarantee",
]


class Page(models.Model):
    """
    Static policy / info page addressed by slug.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    slug = models.SlugField(max_length=120, unique=True)
    title = models.CharField(max_length=200)
    body = models.TextField(blank=True, default="")
    is_published = models.BooleanField(default=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["slug"]

    def __str__(self):
        return self.slug
