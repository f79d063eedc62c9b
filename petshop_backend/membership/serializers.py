# membership/serializers.py

from rest_framework import serializers

from membership.models import Membership
from membership.tiers import TIER_CHOICES


class TierSerializer(serializers.Serializer):
    key = serializers.CharField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    discount_percent = serializers.SerializerMethodField()
    reward_multiplier = serializers.DecimalField(max_digits=4, decimal_places=1)
    checkin_bonus = serializers.DecimalField(max_digits=6, decimal_places=2)
    wallet_usage_percent = serializers.SerializerMethodField()
    benefits = serializers.ListField(child=serializers.CharField())

    def get_discount_percent(self, tier) -> int:
        return int(tier.discount_rate * 100)

    def get_wallet_usage_percent(self, tier) -> int:
        return int(tier.wallet_usage_rate * 100)


class MembershipSerializer(serializers.ModelSerializer):
    tier_name = serializers.SerializerMethodField()
    is_active = serializers.BooleanField(read_only=True)

    class Meta:
        model = Membership
        fields = [
            "id",
            "tier",
            "tier_name",
            "start_date",
            "expiry_date",
            "is_active",
            "auto_renew",
            "total_saved",
            "exclusive_products_purchased",
            "last_renew_date",
        ]
        read_only_fields = fields

    def get_tier_name(self, obj) -> str:
        tier = obj.tier_info
        return tier.name if tier else obj.tier


class MembershipPurchaseSerializer(serializers.Serializer):
    tier = serializers.ChoiceField(choices=TIER_CHOICES)


class AutoRenewSerializer(serializers.Serializer):
    auto_renew = serializers.BooleanField()


class MembershipGrantSerializer(serializers.Serializer):
    user = serializers.UUIDField()
    tier = serializers.ChoiceField(choices=TIER_CHOICES)
