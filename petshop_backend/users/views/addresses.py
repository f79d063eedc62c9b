# users/views/addresses.py

"""
ADDRESS BOOK

Owner-scoped: a user only ever sees their own addresses
(another user's address id answers 404).
"""

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from users.models import Address
from users.serializers import AddressSerializer
from users.services.addresses import (
    create_address,
    delete_address,
    set_default_address,
    update_address,
)


def _owned_address(request, pk) -> Address:
    return get_object_or_404(Address, pk=pk, user=request.user)


class AddressListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: AddressSerializer(many=True)})
    def get(self, request):
        qs = Address.objects.filter(user=request.user)
        return Response(AddressSerializer(qs, many=True).data)

    @extend_schema(request=AddressSerializer, responses={201: AddressSerializer})
    def post(self, request):
        serializer = AddressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        address = create_address(user=request.user, data=dict(serializer.validated_data))
        return Response(AddressSerializer(address).data, status=status.HTTP_201_CREATED)


class AddressDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: AddressSerializer})
    def get(self, request, pk):
        return Response(AddressSerializer(_owned_address(request, pk)).data)

    @extend_schema(request=AddressSerializer, responses={200: AddressSerializer})
    def patch(self, request, pk):
        address = _owned_address(request, pk)
        serializer = AddressSerializer(address, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        address = update_address(address=address, data=dict(serializer.validated_data))
        return Response(AddressSerializer(address).data)

    def delete(self, request, pk):
        delete_address(address=_owned_address(request, pk))
        return Response(status=status.HTTP_204_NO_CONTENT)


class AddressSetDefaultView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: AddressSerializer})
    def post(self, request, pk):
        address = set_default_address(address=_owned_address(request, pk))
        return Response(AddressSerializer(address).data)
