from django.contrib import admin

from content.models import Announcement, Banner, BlogPost, Page


@admin.register(BlogPost)
class BlogPostAdmin(admin.ModelAdmin):
    list_display = ("title", "category", "author", "status", "is_featured", "published_at")
    list_filter = ("status", "category", "is_featured")
    search_fields = ("title", "slug", "author")
    readonly_fields = ("published_at", "created_at", "updated_at")


@admin.register(Page)
class PageAdmin(admin.ModelAdmin):
    list_display = ("slug", "title", "is_published", "updated_at")


@admin.register(Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display = ("text", "is_active", "created_at")
    list_filter = ("is_active",)


@admin.register(Banner)
class BannerAdmin(admin.ModelAdmin):
    list_display = ("title", "image_url", "sort_order", "is_active")
    list_filter = ("is_active",)
