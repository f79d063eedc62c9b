# promotions/serializers.py

from rest_framework import serializers

from promotions.models import Coupon


class CouponSerializer(serializers.ModelSerializer):
    class Meta:
        model = Coupon
        fields = [
            "id",
            "code",
            "description",
            "discount_type",
            "discount_value",
            "min_order_amount",
            "max_discount_amount",
            "usage_limit",
            "used_count",
            "valid_from",
            "valid_until",
            "is_active",
            "issued_to",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "used_count", "created_at", "updated_at"]

    def validate_code(self, value):
        value = (value or "").strip().upper()
        if not value:
            raise serializers.ValidationError("code is required")
        qs = Coupon.objects.filter(code=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Coupon code already exists")
        return value

    def validate(self, attrs):
        dtype = attrs.get("discount_type", getattr(self.instance, "discount_type", None))
        value = attrs.get("discount_value", getattr(self.instance, "discount_value", None))
        if dtype == Coupon.TYPE_PERCENTAGE and value is not None and value > 100:
            raise serializers.ValidationError({"discount_value": "percentage cannot exceed 100"})

        start = attrs.get("valid_from", getattr(self.instance, "valid_from", None))
        end = attrs.get("valid_until", getattr(self.instance, "valid_until", None))
        if start and end and end < start:
            raise serializers.ValidationError({"valid_until": "valid_until must be after valid_from"})

        limit = attrs.get("usage_limit")
        if limit is not None and limit < 1:
            raise serializers.ValidationError({"usage_limit": "usage_limit must be at least 1"})
        return attrs


class CouponValidateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=40)
    order_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
