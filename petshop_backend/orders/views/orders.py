# orders/views/orders.py

"""
CUSTOMER ORDER READS

GET  /api/orders/                        my orders (paginated)
GET  /api/orders/<order_id>/             my order detail
POST /api/orders/<order_id>/cancel/      cancel while processing
GET  /api/orders/invoices/               my invoices (paginated)
GET  /api/orders/invoices/<invoice_id>/  invoice detail
GET  /api/orders/track/?order_number=&email=   public tracking
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from catalog.views.public import PublicCatalogThrottle
from orders.models import Invoice, Order
from orders.serializers import (
    CancelOrderSerializer,
    InvoiceSerializer,
    OrderSerializer,
    OrderTrackingQuerySerializer,
    OrderTrackingSerializer,
)
from orders.services.exceptions import OrderServiceError
from orders.services.order_lifecycle import cancel_by_customer
from orders.views.common import error_response, service_error_response


def _order_not_found():
    return error_response(code="ORDER_NOT_FOUND", message="Order not found", http_status=status.HTTP_404_NOT_FOUND)


class MyOrderListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = OrderSerializer
    filterset_fields = ["status"]

    def get_queryset(self):
        return (
            Order.objects.filter(user=self.request.user)
            .select_related("invoice")
            .prefetch_related("items")
            .order_by("-created_at")
        )

    @extend_schema(tags=["Orders"])
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class MyOrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Orders"], responses={200: OrderSerializer})
    def get(self, request, order_id):
        order = Order.objects.filter(pk=order_id, user=request.user).first()
        if order is None:
            return _order_not_found()
        return Response(OrderSerializer(order).data)


class MyOrderCancelView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Orders"], request=CancelOrderSerializer, responses={200: OrderSerializer})
    def post(self, request, order_id):
        s = CancelOrderSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        order = Order.objects.filter(pk=order_id, user=request.user).first()
        if order is None:
            return _order_not_found()

        try:
            order = cancel_by_customer(order=order, user=request.user, reason=s.validated_data.get("reason", ""))
        except OrderServiceError as exc:
            return service_error_response(exc)

        return Response(OrderSerializer(order).data)


class MyInvoiceListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InvoiceSerializer

    def get_queryset(self):
        return Invoice.objects.filter(user=self.request.user).select_related("order").order_by("-issued_at")

    @extend_schema(tags=["Invoices"])
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class MyInvoiceDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Invoices"], responses={200: InvoiceSerializer})
    def get(self, request, invoice_id):
        invoice = Invoice.objects.select_related("order").filter(pk=invoice_id, user=request.user).first()
        if invoice is None:
            return error_response(
                code="INVOICE_NOT_FOUND",
                message="Invoice not found",
                http_status=status.HTTP_404_NOT_FOUND,
            )
        return Response(InvoiceSerializer(invoice).data)


class OrderTrackingView(APIView):
    """
    Anonymous tracking. Order number and email must both match;
    a mismatch is indistinguishable from an unknown order.
    """

    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [PublicCatalogThrottle]

    @extend_schema(
        tags=["Orders"],
        parameters=[
            OpenApiParameter("order_number", str, required=True),
            OpenApiParameter("email", str, required=True),
        ],
        responses={200: OrderTrackingSerializer},
    )
    def get(self, request):
        s = OrderTrackingQuerySerializer(data=request.query_params)
        s.is_valid(raise_exception=True)

        order = Order.objects.filter(
            order_number__iexact=s.validated_data["order_number"].strip(),
            customer_email__iexact=s.validated_data["email"].strip(),
        ).first()
        if order is None:
            return _order_not_found()

        return Response(OrderTrackingSerializer(order).data)
