# catalog/serializers/category.py

from rest_framework import serializers

from catalog.models import Brand, Category


def _validate_unique_slug(model, value, instance):
    value = (value or "").strip().lower()
    if not value:
        return value
    qs = model.objects.filter(slug=value)
    if instance is not None:
        qs = qs.exclude(pk=instance.pk)
    if qs.exists():
        raise serializers.ValidationError("slug is already in use")
    return value


class CategorySerializer(serializers.ModelSerializer):
    """
    Category serializer (staff write + public read).

    Rules:
    - slug optional on write (generated from name)
    - parent is a category id
    """

    name = serializers.CharField(required=True, allow_blank=False, max_length=120)
    slug = serializers.SlugField(required=False, allow_blank=True, max_length=140)

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "image",
            "parent",
            "sort_order",
            "is_active",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def validate_name(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v

    def validate_slug(self, value):
        return _validate_unique_slug(Category, value, self.instance)


class CategoryTreeSerializer(serializers.ModelSerializer):
    children = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ["id", "name", "slug", "description", "image", "children"]

    def get_children(self, obj):
        kids = [c for c in obj.children.all() if c.is_active]
        return CategoryTreeSerializer(kids, many=True).data


class BrandSerializer(serializers.ModelSerializer):
    name = serializers.CharField(required=True, allow_blank=False, max_length=120)
    slug = serializers.SlugField(required=False, allow_blank=True, max_length=140)

    class Meta:
        model = Brand
        fields = ["id", "name", "slug", "logo", "description", "is_active", "created_at"]
        read_only_fields = ["id", "created_at"]

    def validate_slug(self, value):
        return _validate_unique_slug(Brand, value, self.instance)
