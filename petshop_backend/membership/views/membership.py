# membership/views/membership.py

"""
MEMBERSHIP API

Public:
- GET  /api/membership/tiers/

Customer:
- GET   /api/membership/me/
- POST  /api/membership/purchase/      {tier}  (paid from wallet)
- PATCH /api/membership/auto-renew/    {auto_renew}

Staff (members.manage):
- POST /api/membership/manage/grant/   {user, tier}
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from membership.serializers import (
    AutoRenewSerializer,
    MembershipGrantSerializer,
    MembershipPurchaseSerializer,
    MembershipSerializer,
    TierSerializer,
)
from membership.services.memberships import (
    MembershipError,
    get_active_membership,
    grant_membership,
    purchase_membership,
    set_auto_renew,
)
from membership.models import Membership
from membership.tiers import TIERS
from permissions.roles import CAP_MEMBERS_MANAGE, HasCapability
from wallet.services.exceptions import WalletError

User = get_user_model()


def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


class TierListView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(tags=["Public"], responses={200: TierSerializer(many=True)})
    def get(self, request):
        return Response(TierSerializer(list(TIERS.values()), many=True).data)


class MyMembershipView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Membership"], responses={200: MembershipSerializer})
    def get(self, request):
        membership = Membership.objects.filter(user=request.user).first()
        active = get_active_membership(request.user)
        return Response(
            {
                "is_member": active is not None,
                "membership": MembershipSerializer(membership).data if membership else None,
            }
        )


class MembershipPurchaseView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Membership"],
        request=MembershipPurchaseSerializer,
        responses={
            201: MembershipSerializer,
            400: OpenApiResponse(description="Unknown tier / insufficient wallet balance"),
        },
    )
    def post(self, request):
        s = MembershipPurchaseSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            membership = purchase_membership(user=request.user, tier_key=s.validated_data["tier"])
        except (MembershipError, WalletError) as exc:
            return error_response(code=exc.code, message=exc.message, http_status=exc.http_status)

        return Response(
            {"membership": MembershipSerializer(membership).data},
            status=status.HTTP_201_CREATED,
        )


class AutoRenewView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Membership"], request=AutoRenewSerializer, responses={200: MembershipSerializer})
    def patch(self, request):
        s = AutoRenewSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            membership = set_auto_renew(user=request.user, enabled=s.validated_data["auto_renew"])
        except MembershipError as exc:
            return error_response(code=exc.code, message=exc.message, http_status=exc.http_status)

        return Response({"membership": MembershipSerializer(membership).data})


class MembershipGrantView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_MEMBERS_MANAGE

    @extend_schema(tags=["Membership (staff)"], request=MembershipGrantSerializer, responses={201: MembershipSerializer})
    def post(self, request):
        s = MembershipGrantSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        user = get_object_or_404(User, pk=s.validated_data["user"])
        try:
            membership = grant_membership(user=user, tier_key=s.validated_data["tier"], granted_by=request.user)
        except MembershipError as exc:
            return error_response(code=exc.code, message=exc.message, http_status=exc.http_status)

        return Response(
            {"membership": MembershipSerializer(membership).data},
            status=status.HTTP_201_CREATED,
        )
