# catalog/serializers/product.py

"""
PRODUCT SERIALIZERS

- ProductSerializer: canonical read shape (public + staff)
- ProductWriteSerializer: staff create/update (stock is NOT writable here;
  stock only moves through the inventory service)
"""

from rest_framework import serializers

from catalog.models import Brand, Category, Product, ProductEvent, StockMovement
from catalog.services.inventory import adjust_stock

# stock_quantity is a 32-bit column
MAX_STOCK = 2_147_483_647


class ProductSerializer(serializers.ModelSerializer):
    category_slug = serializers.CharField(source="category.slug", read_only=True, default=None)
    category_name = serializers.CharField(source="category.name", read_only=True, default=None)
    brand_slug = serializers.CharField(source="brand.slug", read_only=True, default=None)
    brand_name = serializers.CharField(source="brand.name", read_only=True, default=None)
    stock_status = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "price",
            "original_price",
            "discount_percent",
            "category",
            "category_slug",
            "category_name",
            "brand",
            "brand_slug",
            "brand_name",
            "subcategory",
            "image",
            "images",
            "rating",
            "review_count",
            "stock_quantity",
            "stock_status",
            "tags",
            "features",
            "specifications",
            "is_new",
            "is_bestseller",
            "is_on_sale",
            "is_member_exclusive",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductWriteSerializer(serializers.ModelSerializer):
    slug = serializers.SlugField(required=False, allow_blank=True, max_length=255)
    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), required=False, allow_null=True
    )
    brand = serializers.PrimaryKeyRelatedField(
        queryset=Brand.objects.all(), required=False, allow_null=True
    )
    initial_stock = serializers.IntegerField(required=False, min_value=0, max_value=MAX_STOCK, write_only=True)

    class Meta:
        model = Product
        fields = [
            "name",
            "slug",
            "description",
            "price",
            "original_price",
            "discount_percent",
            "category",
            "brand",
            "subcategory",
            "image",
            "images",
            "rating",
            "review_count",
            "low_stock_threshold",
            "tags",
            "features",
            "specifications",
            "is_new",
            "is_bestseller",
            "is_on_sale",
            "is_member_exclusive",
            "is_active",
            "initial_stock",
        ]

    def validate_slug(self, value):
        value = (value or "").strip().lower()
        if not value:
            return value
        qs = Product.objects.filter(slug=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("slug is already in use")
        return value

    def validate_price(self, value):
        if value is None or value < 0:
            raise serializers.ValidationError("price must be non-negative")
        return value

    def validate_discount_percent(self, value):
        if value < 0 or value > 100:
            raise serializers.ValidationError("discount_percent must be between 0 and 100")
        return value

    def validate_tags(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("tags must be a list")
        return value

    def create(self, validated_data):
        initial = validated_data.pop("initial_stock", 0) or 0
        product = super().create(validated_data)
        if initial > 0:
            request = self.context.get("request")
            adjust_stock(
                product=product,
                delta=initial,
                note="Initial stock",
                user=getattr(request, "user", None),
            )
            product.refresh_from_db()
        return product

    def update(self, instance, validated_data):
        validated_data.pop("initial_stock", None)
        return super().update(instance, validated_data)

    def to_representation(self, instance):
        return ProductSerializer(instance, context=self.context).data


class StockAdjustSerializer(serializers.Serializer):
    delta = serializers.IntegerField(min_value=-MAX_STOCK, max_value=MAX_STOCK)
    note = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def validate_delta(self, value):
        if value == 0:
            raise serializers.ValidationError("delta must be non-zero")
        return value


class StockMovementSerializer(serializers.ModelSerializer):
    class Meta:
        model = StockMovement
        fields = [
            "id",
            "product",
            "reason",
            "quantity_change",
            "stock_before",
            "stock_after",
            "reference",
            "note",
            "performed_by",
            "created_at",
        ]
        read_only_fields = fields


class TrackEventSerializer(serializers.Serializer):
    product = serializers.PrimaryKeyRelatedField(queryset=Product.objects.filter(is_active=True))
    event_type = serializers.ChoiceField(choices=ProductEvent.EventType.choices)
    metadata = serializers.DictField(required=False)


class RecommendationSerializer(serializers.Serializer):
    product = ProductSerializer()
    score = serializers.FloatField()
    reason = serializers.CharField()
