# orders/views/staff.py

"""
STAFF ORDER MANAGEMENT (orders.manage)

GET   /api/orders/manage/                       all orders (?status=, ?payment_status=)
GET   /api/orders/manage/<order_id>/            detail
PATCH /api/orders/manage/<order_id>/status/     {status, reason}
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.models import Order
from orders.serializers import OrderSerializer, OrderStatusUpdateSerializer
from orders.services.exceptions import OrderServiceError
from orders.services.order_lifecycle import transition_order
from orders.views.common import error_response, service_error_response
from permissions.roles import CAP_ORDERS_MANAGE, HasCapability


class StaffOrderListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ORDERS_MANAGE
    serializer_class = OrderSerializer
    filterset_fields = ["status", "payment_status", "payment_method"]

    def get_queryset(self):
        return Order.objects.select_related("invoice").prefetch_related("items").order_by("-created_at")

    @extend_schema(tags=["Orders (staff)"])
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class StaffOrderDetailView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ORDERS_MANAGE

    @extend_schema(tags=["Orders (staff)"], responses={200: OrderSerializer})
    def get(self, request, order_id):
        order = Order.objects.filter(pk=order_id).first()
        if order is None:
            return error_response(code="ORDER_NOT_FOUND", message="Order not found", http_status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)


class StaffOrderStatusView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ORDERS_MANAGE

    @extend_schema(tags=["Orders (staff)"], request=OrderStatusUpdateSerializer, responses={200: OrderSerializer})
    def patch(self, request, order_id):
        s = OrderStatusUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        order = Order.objects.filter(pk=order_id).first()
        if order is None:
            return error_response(code="ORDER_NOT_FOUND", message="Order not found", http_status=status.HTTP_404_NOT_FOUND)

        try:
            order = transition_order(
                order=order,
                target_status=s.validated_data["status"],
                performed_by=request.user,
                reason=s.validated_data.get("reason", ""),
            )
        except OrderServiceError as exc:
            return service_error_response(exc)

        return Response(OrderSerializer(order).data)
