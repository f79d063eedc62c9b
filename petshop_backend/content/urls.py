# content/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from content.views import (
    AnnouncementListView,
    AnnouncementViewSet,
    BannerListView,
    BannerViewSet,
    BlogPostDetailView,
    BlogPostListView,
    BlogPostViewSet,
    PageDetailView,
    PageViewSet,
)

app_name = "content"

router = DefaultRouter()

router.register(r"blog", BlogPostViewSet, basename="manage-blog")
router.register(r"pages", PageViewSet, basename="manage-pages")
router.register(r"announcements", AnnouncementViewSet, basename="manage-announcements")
router.register(r"banners", BannerViewSet, basename="manage-banners")

urlpatterns = [
    # ---------------- PUBLIC ----------------
    path("blog/", BlogPostListView.as_view(), name="blog-list"),
    path("blog/<slug:slug>/", BlogPostDetailView.as_view(), name="blog-detail"),
    path("pages/<slug:slug>/", PageDetailView.as_view(), name="page-detail"),
    path("announcements/", AnnouncementListView.as_view(), name="announcement-list"),
    path("banners/", BannerListView.as_view(), name="banner-list"),
    # ---------------- STAFF ----------------
    path("manage/", include(router.urls)),
]
