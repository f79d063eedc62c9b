from .coupons import CouponValidateView, CouponViewSet

__all__ = ["CouponValidateView", "CouponViewSet"]
