# catalog/views/staff.py

"""
STAFF CATALOG MANAGEMENT

- Categories / brands / products CRUD   (catalog.edit)
- Stock adjustment + movement history   (inventory.adjust)

Products are soft-deleted (is_active=False) so order history keeps
pointing at real rows.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from catalog.models import Brand, Category, Product, StockMovement
from catalog.serializers import (
    BrandSerializer,
    CategorySerializer,
    ProductSerializer,
    ProductWriteSerializer,
    StockAdjustSerializer,
    StockMovementSerializer,
)
from catalog.services.exceptions import InsufficientStockError, InventoryError
from catalog.services import inventory
from permissions.roles import CAP_CATALOG_EDIT, CAP_INVENTORY_ADJUST, HasCapability


def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


class _CatalogEditViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_CATALOG_EDIT

    def perform_create(self, serializer):
        try:
            serializer.save()
        except DjangoValidationError as exc:
            raise ValidationError(exc.message_dict if hasattr(exc, "message_dict") else exc.messages)

    perform_update = perform_create


class CategoryViewSet(_CatalogEditViewSet):
    queryset = Category.objects.all().order_by("sort_order", "name")
    serializer_class = CategorySerializer


class BrandViewSet(_CatalogEditViewSet):
    queryset = Brand.objects.all().order_by("name")
    serializer_class = BrandSerializer


class ProductViewSet(_CatalogEditViewSet):
    """
    Staff product endpoints.

    - CRUD (DELETE deactivates)
    - POST   /<id>/adjust-stock/   {delta, note}
    - GET    /<id>/movements/
    """

    queryset = Product.objects.all().select_related("category", "brand").order_by("-created_at")

    def get_serializer_class(self):
        if self.action in {"create", "update", "partial_update"}:
            return ProductWriteSerializer
        return ProductSerializer

    def get_permissions(self):
        if self.action in {"adjust_stock", "movements"}:
            self.required_capability = CAP_INVENTORY_ADJUST
        return super().get_permissions()

    def destroy(self, request, *args, **kwargs):
        product = self.get_object()
        product.is_active = False
        product.save(update_fields=["is_active", "updated_at"])
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=StockAdjustSerializer, responses={200: StockMovementSerializer})
    @action(detail=True, methods=["post"], url_path="adjust-stock")
    def adjust_stock(self, request, pk=None):
        product = self.get_object()
        s = StockAdjustSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            movement = inventory.adjust_stock(
                product=product,
                delta=s.validated_data["delta"],
                note=s.validated_data.get("note", ""),
                user=request.user,
            )
        except InsufficientStockError as exc:
            return error_response(
                code="INSUFFICIENT_STOCK",
                message=str(exc),
                http_status=status.HTTP_409_CONFLICT,
            )
        except InventoryError as exc:
            return error_response(
                code="INVALID_QUANTITY",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(StockMovementSerializer(movement).data, status=status.HTTP_200_OK)

    @extend_schema(responses={200: StockMovementSerializer(many=True)})
    @action(detail=True, methods=["get"], url_path="movements")
    def movements(self, request, pk=None):
        product = self.get_object()
        qs = StockMovement.objects.filter(product=product).order_by("-created_at")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(StockMovementSerializer(page, many=True).data)
        return Response(StockMovementSerializer(qs, many=True).data)
