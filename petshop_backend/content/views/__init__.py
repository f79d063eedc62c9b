from .public import (
    AnnouncementListView,
    BannerListView,
    BlogPostDetailView,
    BlogPostListView,
    PageDetailView,
)
from .staff import AnnouncementViewSet, BannerViewSet, BlogPostViewSet, PageViewSet

__all__ = [
    "AnnouncementListView",
    "BannerListView",
    "BlogPostDetailView",
    "BlogPostListView",
    "PageDetailView",
    "AnnouncementViewSet",
    "BannerViewSet",
    "BlogPostViewSet",
    "PageViewSet",
]
