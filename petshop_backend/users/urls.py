# users/urls.py

from django.urls import path

from .views import (
    AddressDetailView,
    AddressListCreateView,
    AddressSetDefaultView,
    LoginView,
    MeView,
    RegisterView,
)

app_name = "users"

urlpatterns = [
    # ---------------- PUBLIC AUTH ----------------
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    # ---------------- AUTHENTICATED ----------------
    path("me/", MeView.as_view(), name="me"),
    path("addresses/", AddressListCreateView.as_view(), name="address-list"),
    path("addresses/<uuid:pk>/", AddressDetailView.as_view(), name="address-detail"),
    path("addresses/<uuid:pk>/set-default/", AddressSetDefaultView.as_view(), name="address-set-default"),
]
