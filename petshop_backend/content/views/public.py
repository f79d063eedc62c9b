# content/views/public.py

"""
PUBLIC CONTENT

GET /api/content/blog/                 published posts (?category=, ?featured=true)
GET /api/content/blog/<slug>/          published post
GET /api/content/pages/<slug>/         published policy page
GET /api/content/announcements/        active announcements
GET /api/content/banners/              active home banners
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from catalog.views.public import PublicCatalogThrottle
from content.models import Announcement, Banner, BlogPost, Page
from content.serializers import (
    AnnouncementSerializer,
    BannerSerializer,
    BlogPostListSerializer,
    BlogPostSerializer,
    PageSerializer,
)


def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


class _PublicContentMixin:
    permission_classes = [AllowAny]
    throttle_classes = [PublicCatalogThrottle]


class BlogPostListView(_PublicContentMixin, generics.ListAPIView):
    serializer_class = BlogPostListSerializer

    def get_queryset(self):
        qs = BlogPost.objects.filter(status=BlogPost.STATUS_PUBLISHED)

        category = (self.request.query_params.get("category") or "").strip()
        if category:
            qs = qs.filter(category__iexact=category)

        featured = (self.request.query_params.get("featured") or "").strip().lower()
        if featured in {"1", "true", "yes"}:
            qs = qs.filter(is_featured=True)

        return qs.order_by("-published_at")

    @extend_schema(
        tags=["Content"],
        parameters=[
            OpenApiParameter("category", str, required=False),
            OpenApiParameter("featured", bool, required=False),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class BlogPostDetailView(_PublicContentMixin, APIView):
    @extend_schema(tags=["Content"], responses={200: BlogPostSerializer})
    def get(self, request, slug):
        post = BlogPost.objects.filter(slug=slug, status=BlogPost.STATUS_PUBLISHED).first()
        if post is None:
            return error_response(code="POST_NOT_FOUND", message="Post not found", http_status=status.HTTP_404_NOT_FOUND)
        return Response(BlogPostSerializer(post).data)


class PageDetailView(_PublicContentMixin, APIView):
    @extend_schema(tags=["Content"], responses={200: PageSerializer})
    def get(self, request, slug):
        page = Page.objects.filter(slug=slug, is_published=True).first()
        if page is None:
            return error_response(code="PAGE_NOT_FOUND", message="Page not found", http_status=status.HTTP_404_NOT_FOUND)
        return Response(PageSerializer(page).data)


class AnnouncementListView(_PublicContentMixin, APIView):
    @extend_schema(tags=["Content"], responses={200: AnnouncementSerializer(many=True)})
    def get(self, request):
        qs = Announcement.objects.filter(is_active=True).order_by("-created_at")
        return Response(AnnouncementSerializer(qs, many=True).data)


class BannerListView(_PublicContentMixin, APIView):
    @extend_schema(tags=["Content"], responses={200: BannerSerializer(many=True)})
    def get(self, request):
        qs = Banner.objects.filter(is_active=True).order_by("sort_order", "created_at")
        return Response(BannerSerializer(qs, many=True).data)
