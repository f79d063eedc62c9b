# content/views/staff.py

"""
STAFF CONTENT MANAGEMENT (content.edit)

Router under /api/content/manage/:
- blog/, pages/, announcements/, banners/
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated

from content.models import Announcement, Banner, BlogPost, Page
from content.serializers import AnnouncementSerializer, BannerSerializer, BlogPostSerializer, PageSerializer
from permissions.roles import CAP_CONTENT_EDIT, HasCapability

logger = logging.getLogger("content")


class _ContentEditViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_CONTENT_EDIT

    def perform_create(self, serializer):
        try:
            instance = serializer.save()
        except DjangoValidationError as exc:
            raise ValidationError(exc.message_dict if hasattr(exc, "message_dict") else exc.messages)

        logger.info(
            "Content saved",
            extra={
                "model": instance.__class__.__name__,
                "object_id": str(instance.pk),
                "user_id": str(self.request.user.pk),
            },
        )

    perform_update = perform_create


class BlogPostViewSet(_ContentEditViewSet):
    queryset = BlogPost.objects.all().order_by("-created_at")
    serializer_class = BlogPostSerializer
    filterset_fields = ["status", "category", "is_featured"]


class PageViewSet(_ContentEditViewSet):
    queryset = Page.objects.all().order_by("slug")
    serializer_class = PageSerializer
    lookup_field = "slug"


class AnnouncementViewSet(_ContentEditViewSet):
    queryset = Announcement.objects.all().order_by("-created_at")
    serializer_class = AnnouncementSerializer


class BannerViewSet(_ContentEditViewSet):
    queryset = Banner.objects.all().order_by("sort_order", "created_at")
    serializer_class = BannerSerializer
