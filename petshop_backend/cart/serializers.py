# cart/serializers.py

from rest_framework import serializers

from cart.models import CartItem, WishlistItem
from catalog.models import Product
from catalog.serializers import ProductSerializer


class CartProductSerializer(serializers.ModelSerializer):
    stock_status = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "image",
            "price",
            "stock_quantity",
            "stock_status",
            "is_member_exclusive",
            "is_active",
        ]
        read_only_fields = fields


class CartItemSerializer(serializers.ModelSerializer):
    product = CartProductSerializer(read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    available = serializers.SerializerMethodField()

    class Meta:
        model = CartItem
        fields = ["id", "product", "quantity", "unit_price", "line_total", "available", "added_at"]
        read_only_fields = fields

    def get_available(self, obj) -> bool:
        return bool(obj.product.is_active and obj.product.stock_quantity >= obj.quantity)


class CartAddSerializer(serializers.Serializer):
    product = serializers.UUIDField()
    quantity = serializers.IntegerField(required=False, default=1, min_value=1)


class CartUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField()


class ApplyCouponSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=40)


class WishlistItemSerializer(serializers.ModelSerializer):
    product = ProductSerializer(read_only=True)

    class Meta:
        model = WishlistItem
        fields = ["id", "product", "created_at"]
        read_only_fields = fields


class WishlistAddSerializer(serializers.Serializer):
    product = serializers.UUIDField()


class MoveToCartSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(required=False, default=1, min_value=1)


def cart_payload(cart, totals) -> dict:
    items = cart.items.select_related("product").order_by("added_at")
    return {
        "id": str(cart.id),
        "items": CartItemSerializer(items, many=True).data,
        "coupon_code": cart.coupon_code or None,
        "totals": totals.as_dict(),
    }
