# wallet/tests/test_ledger.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase

from wallet.models import WalletTransaction
from wallet.services import ledger
from wallet.services.exceptions import InsufficientWalletBalanceError, InvalidAmountError
from wallet.services.redemption import adjust_wallet

User = get_user_model()


class WalletLedgerTests(TestCase):
    """
    GUARANTEES:
    - Every mutation writes one immutable transaction with before/after balances
    - Spending more than the balance is rejected
    - Freeze / unfreeze move money between balance and frozen balance
    """

    def setUp(self):
        self.user = User.objects.create_user(email="w@example.com", password="x")

    def test_wallet_created_lazily(self):
        wallet = ledger.get_or_create_wallet(self.user)
        self.assertEqual(wallet.balance, Decimal("0.00"))
        self.assertEqual(ledger.get_or_create_wallet(self.user).pk, wallet.pk)

    def test_earn_then_spend(self):
        ledger.earn(user=self.user, amount="10", source="GAME_QUIZ")
        txn = ledger.spend(user=self.user, amount="3.50", source=WalletTransaction.SOURCE_ORDER_PAYMENT)

        wallet = ledger.get_or_create_wallet(self.user)
        self.assertEqual(wallet.balance, Decimal("6.50"))
        self.assertEqual(wallet.total_earned, Decimal("10.00"))
        self.assertEqual(wallet.total_spent, Decimal("3.50"))

        self.assertEqual(txn.type, WalletTransaction.Type.SPEND)
        self.assertEqual(txn.balance_before, Decimal("10.00"))
        self.assertEqual(txn.balance_after, Decimal("6.50"))

    def test_refund_credits_balance(self):
        ledger.refund(user=self.user, amount="4.00", source=WalletTransaction.SOURCE_ORDER_REFUND)
        wallet = ledger.get_or_create_wallet(self.user)
        self.assertEqual(wallet.balance, Decimal("4.00"))
        self.assertEqual(wallet.total_earned, Decimal("4.00"))

    def test_spend_more_than_balance_rejected(self):
        ledger.earn(user=self.user, amount="2", source="GAME_QUIZ")
        with self.assertRaises(InsufficientWalletBalanceError):
            ledger.spend(user=self.user, amount="2.01", source=WalletTransaction.SOURCE_ORDER_PAYMENT)

        self.assertEqual(ledger.get_or_create_wallet(self.user).balance, Decimal("2.00"))
        self.assertEqual(WalletTransaction.objects.filter(user=self.user).count(), 1)

    def test_amount_must_be_positive(self):
        with self.assertRaises(InvalidAmountError):
            ledger.earn(user=self.user, amount="0", source="GAME_QUIZ")
        with self.assertRaises(InvalidAmountError):
            ledger.spend(user=self.user, amount="-1", source="X")

    def test_freeze_and_unfreeze(self):
        ledger.earn(user=self.user, amount="10", source="GAME_QUIZ")
        ledger.freeze(user=self.user, amount="4")

        wallet = ledger.get_or_create_wallet(self.user)
        self.assertEqual(wallet.balance, Decimal("6.00"))
        self.assertEqual(wallet.frozen_balance, Decimal("4.00"))

        with self.assertRaises(InsufficientWalletBalanceError):
            ledger.unfreeze(user=self.user, amount="5")

        ledger.unfreeze(user=self.user, amount="4")
        wallet.refresh_from_db()
        self.assertEqual(wallet.balance, Decimal("10.00"))
        self.assertEqual(wallet.frozen_balance, Decimal("0.00"))

    def test_transactions_are_immutable(self):
        txn = ledger.earn(user=self.user, amount="1", source="GAME_QUIZ")
        txn.description = "edited"
        with self.assertRaises(ValidationError):
            txn.save()
        with self.assertRaises(ValidationError):
            txn.delete()

    def test_daily_remaining_ignores_staff_credits(self):
        ledger.earn(user=self.user, amount="20", source="GAME_QUIZ")
        adjust_wallet(user=self.user, amount=Decimal("100"), note="goodwill")

        self.assertEqual(ledger.daily_remaining(self.user), Decimal("30.00"))

    def test_staff_debit_uses_spend(self):
        ledger.earn(user=self.user, amount="10", source="GAME_QUIZ")
        txn = adjust_wallet(user=self.user, amount=Decimal("-3"), note="correction")

        self.assertEqual(txn.type, WalletTransaction.Type.SPEND)
        self.assertEqual(txn.source, WalletTransaction.SOURCE_STAFF_ADJUSTMENT)
        self.assertEqual(ledger.get_or_create_wallet(self.user).balance, Decimal("7.00"))
