# wallet/views/staff.py

"""
STAFF WALLET TOOLS (wallet.adjust)

GET  /api/wallet/manage/users/<user_id>/           wallet + recent ledger
POST /api/wallet/manage/users/<user_id>/adjust/    {amount (signed), note}
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import CAP_WALLET_ADJUST, HasCapability
from wallet.serializers import WalletAdjustSerializer, WalletSerializer, WalletTransactionSerializer
from wallet.services import ledger
from wallet.services.exceptions import WalletError
from wallet.services.redemption import adjust_wallet
from wallet.views.common import wallet_error_response

User = get_user_model()


class _StaffWalletView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_WALLET_ADJUST


class StaffWalletDetailView(_StaffWalletView):
    @extend_schema(tags=["Wallet (staff)"])
    def get(self, request, user_id):
        user = get_object_or_404(User, pk=user_id)
        wallet = ledger.get_or_create_wallet(user)
        recent = wallet.transactions.order_by("-created_at")[:50]
        return Response(
            {
                "user_id": str(user.pk),
                "wallet": WalletSerializer(wallet).data,
                "transactions": WalletTransactionSerializer(recent, many=True).data,
            }
        )


class StaffWalletAdjustView(_StaffWalletView):
    @extend_schema(tags=["Wallet (staff)"], request=WalletAdjustSerializer)
    def post(self, request, user_id):
        user = get_object_or_404(User, pk=user_id)

        s = WalletAdjustSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            txn = adjust_wallet(
                user=user,
                amount=s.validated_data["amount"],
                note=s.validated_data.get("note", ""),
                performed_by=request.user,
            )
        except WalletError as exc:
            return wallet_error_response(exc)

        return Response(
            {
                "transaction": WalletTransactionSerializer(txn).data,
                "wallet": WalletSerializer(ledger.get_or_create_wallet(user)).data,
            },
            status=status.HTTP_201_CREATED,
        )
