# orders/urls.py

from django.urls import path

from orders.views.checkout import CheckoutView
from orders.views.orders import (
    MyInvoiceDetailView,
    MyInvoiceListView,
    MyOrderCancelView,
    MyOrderDetailView,
    MyOrderListView,
    OrderTrackingView,
)
from orders.views.staff import StaffOrderDetailView, StaffOrderListView, StaffOrderStatusView

app_name = "orders"

urlpatterns = [
    path("", MyOrderListView.as_view(), name="my-orders"),
    path("checkout/", CheckoutView.as_view(), name="checkout"),
    path("track/", OrderTrackingView.as_view(), name="track"),
    path("invoices/", MyInvoiceListView.as_view(), name="my-invoices"),
    path("invoices/<uuid:invoice_id>/", MyInvoiceDetailView.as_view(), name="invoice-detail"),
    path("manage/", StaffOrderListView.as_view(), name="staff-orders"),
    path("manage/<uuid:order_id>/", StaffOrderDetailView.as_view(), name="staff-order-detail"),
    path("manage/<uuid:order_id>/status/", StaffOrderStatusView.as_view(), name="staff-order-status"),
    path("<uuid:order_id>/", MyOrderDetailView.as_view(), name="order-detail"),
    path("<uuid:order_id>/cancel/", MyOrderCancelView.as_view(), name="order-cancel"),
]
