# promotions/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from promotions.views import CouponValidateView, CouponViewSet

app_name = "promotions"

router = DefaultRouter()
router.register(r"coupons", CouponViewSet, basename="coupons")

urlpatterns = [
    path("coupons/validate/", CouponValidateView.as_view(), name="coupon-validate"),
    path("", include(router.urls)),
]
