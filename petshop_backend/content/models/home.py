# content/models/home.py

import uuid

from django.db import models


class Announcement(models.Model):
    """
    One-line message for the top bar.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    text = models.CharField(max_length=255)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.text


class Banner(models.Model):
    """
    Home screen carousel slide. Lower sort_order shows first.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    image_url = models.CharField(max_length=500)
    title = models.CharField(max_length=200, blank=True, default="")
    link_url = models.CharField(max_length=500, blank=True, default="")
    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["sort_order", "created_at"]

    def __str__(self):
        return self.title or self.image_url
