# catalog/models/category.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from catalog.services.slugs import unique_slug


class Category(models.Model):
    """
    Product category (tree).

    Rules:
    - slug is unique and generated from name when blank
    - parent is optional (top-level categories have none)
    - a category can never be its own ancestor
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=120)
    slug = models.SlugField(max_length=140, unique=True, blank=True)
    description = models.TextField(blank=True, default="")
    image = models.CharField(max_length=500, blank=True, default="")

    parent = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="children",
    )

    sort_order = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["sort_order", "name"]
        verbose_name_plural = "categories"

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "name cannot be blank"})

        node = self.parent
        while node is not None:
            if node.pk == self.pk:
                raise ValidationError({"parent": "A category cannot be nested under itself"})
            node = node.parent

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(Category, self.name, instance=self, max_length=140)
        self.full_clean()
        return super().save(*args, **kwargs)

    def descendant_ids(self) -> list:
        """
        Own id + every child id (depth-first). Used by catalog filtering.
        """
        ids = [self.pk]
        frontier = [self.pk]
        while frontier:
            children = list(
                Category.objects.filter(parent_id__in=frontier).values_list("id", flat=True)
            )
            children = [c for c in children if c not in ids]
            ids.extend(children)
            frontier = children
        return ids

    def __str__(self):
        return self.name


class Brand(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=120)
    slug = models.SlugField(max_length=140, unique=True, blank=True)
    logo = models.CharField(max_length=500, blank=True, default="")
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "name cannot be blank"})

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(Brand, self.name, instance=self, max_length=140)
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return self.name
