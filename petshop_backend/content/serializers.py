# content/serializers.py

from rest_framework import serializers

from content.models import Announcement, Banner, BlogPost, Page


class BlogPostListSerializer(serializers.ModelSerializer):
    class Meta:
        model = BlogPost
        fields = [
            "id",
            "title",
            "slug",
            "excerpt",
            "category",
            "author",
            "image",
            "read_time",
            "tags",
            "is_featured",
            "published_at",
        ]
        read_only_fields = fields


class BlogPostSerializer(serializers.ModelSerializer):
    """
    Full post. Used for the public detail and for staff CRUD.
    """

    class Meta:
        model = BlogPost
        fields = [
            "id",
            "title",
            "slug",
            "excerpt",
            "content",
            "category",
            "author",
            "image",
            "read_time",
            "tags",
            "is_featured",
            "status",
            "published_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "published_at", "created_at", "updated_at"]
        extra_kwargs = {"slug": {"required": False}}

    def validate_tags(self, value):
        if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
            raise serializers.ValidationError("tags must be a list of strings")
        return [t.strip() for t in value if t.strip()]


class PageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Page
        fields = ["id", "slug", "title", "body", "is_published", "updated_at"]
        read_only_fields = ["id", "updated_at"]


class AnnouncementSerializer(serializers.ModelSerializer):
    class Meta:
        model = Announcement
        fields = ["id", "text", "is_active", "created_at"]
        read_only_fields = ["id", "created_at"]


class BannerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Banner
        fields = ["id", "image_url", "title", "link_url", "sort_order", "is_active"]
        read_only_fields = ["id"]
