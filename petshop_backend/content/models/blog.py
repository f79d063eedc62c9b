# content/models/blog.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from catalog.services.slugs import unique_slug


class BlogPost(models.Model):
    """
    Pet-care article.

    Rules:
    - slug is unique and generated from title when blank
    - published_at is stamped the first time status becomes published
      and is kept when a post goes back to draft
    """

    STATUS_DRAFT = "draft"
    STATUS_PUBLISHED = "published"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_PUBLISHED, "Published"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    excerpt = models.TextField(blank=True, default="")
    content = models.TextField()
    category = models.CharField(max_length=100, db_index=True)
    author = models.CharField(max_length=100)
    image = models.CharField(max_length=500, blank=True, default="")
    read_time = models.PositiveSmallIntegerField(default=5, help_text="Minutes")
    tags = models.JSONField(default=list, blank=True)
    is_featured = models.BooleanField(default=False)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    published_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-published_at", "-created_at"]
        indexes = [
            models.Index(fields=["status", "published_at"], name="blog_status_published_idx"),
        ]

    def clean(self):
        self.title = (self.title or "").strip()
        if not self.title:
            raise ValidationError({"title": "title cannot be blank"})
        if not isinstance(self.tags, list):
            raise ValidationError({"tags": "tags must be a list"})

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(BlogPost, self.title, instance=self, max_length=255)
        if self.status == self.STATUS_PUBLISHED and self.published_at is None:
            self.published_at = timezone.now()
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def is_published(self) -> bool:
        return self.status == self.STATUS_PUBLISHED

    def __str__(self):
        return f"{self.title} ({self.status})"
