import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from account import ClientAccount
from amount import Amount
from errors import (
    AccountLockedError,
    AlreadyDisputedError,
    BalanceOverflowError,
    DuplicateTransactionError,
    InsufficientFundsError,
    InvalidAmountError,
    MissingAmountError,
    NotDisputedError,
    UnknownTransactionError,
)
from models import Transaction, TransactionType


def deposit(transaction_id, amount, client_id=1):
    return Transaction(TransactionType.DEPOSIT, client_id, transaction_id, Amount.parse(amount))


def withdrawal(transaction_id, amount, client_id=1):
    return Transaction(TransactionType.WITHDRAWAL, client_id, transaction_id, Amount.parse(amount))


def dispute(transaction_id, client_id=1):
    return Transaction(TransactionType.DISPUTE, client_id, transaction_id)


def resolve(transaction_id, client_id=1):
    return Transaction(TransactionType.RESOLVE, client_id, transaction_id)


def chargeback(transaction_id, client_id=1):
    return Transaction(TransactionType.CHARGEBACK, client_id, transaction_id)


class TestClientAccount:
    def setup_method(self):
        self.account = ClientAccount(client_id=1)

    def check_account(self, available, held, total, locked):
        account = self.account
        assert account.available == Amount.parse(available)
        assert account.held == Amount.parse(held)
        assert account.total == Amount.parse(total)
        assert account.locked is locked

        assert not account.available.is_negative()
        assert not account.held.is_negative()
        assert account.held == account.store.held_amount()

    def test_new_account(self):
        self.check_account("0", "0", "0", False)

    def test_deposit(self):
        self.account.apply(deposit(1, "1.0"))
        self.check_account("1.0", "0", "1.0", False)
        assert 1 in self.account.store

    def test_zero_deposit_allowed(self):
        self.account.apply(deposit(1, "0"))
        self.check_account("0", "0", "0", False)

    def test_deposit_duplicate_transaction_id(self):
        self.account.apply(deposit(1, "1.0"))
        with pytest.raises(DuplicateTransactionError):
            self.account.apply(deposit(1, "2.0"))
        self.check_account("1.0", "0", "1.0", False)

    def test_deposit_missing_amount(self):
        with pytest.raises(MissingAmountError):
            self.account.apply(Transaction(TransactionType.DEPOSIT, 1, 1))
        self.check_account("0", "0", "0", False)
        assert 1 not in self.account.store

    def test_deposit_negative_amount(self):
        with pytest.raises(InvalidAmountError):
            self.account.apply(deposit(1, "-5"))
        self.check_account("0", "0", "0", False)
        assert 1 not in self.account.store

    def test_withdrawal(self):
        self.account.apply(deposit(1, "2.0"))
        self.account.apply(withdrawal(2, "1.0"))
        self.check_account("1.0", "0", "1.0", False)

    def test_withdrawal_entire_balance(self):
        self.account.apply(deposit(1, "2.0"))
        self.account.apply(withdrawal(2, "2.0"))
        self.check_account("0", "0", "0", False)

    def test_withdrawal_insufficient_funds(self):
        self.account.apply(deposit(1, "1.0"))
        with pytest.raises(InsufficientFundsError):
            self.account.apply(withdrawal(2, "2.0"))
        self.check_account("1.0", "0", "1.0", False)

    def test_withdrawal_missing_amount(self):
        with pytest.raises(MissingAmountError):
            self.account.apply(Transaction(TransactionType.WITHDRAWAL, 1, 1))

    def test_withdrawal_negative_amount(self):
        self.account.apply(deposit(1, "100"))
        with pytest.raises(InvalidAmountError):
            self.account.apply(withdrawal(2, "-50"))
        self.check_account("100", "0", "100", False)

    def test_withdrawal_is_not_disputable(self):
        self.account.apply(deposit(1, "100"))
        self.account.apply(withdrawal(2, "50"))
        with pytest.raises(UnknownTransactionError):
            self.account.apply(dispute(2))
        self.check_account("50", "0", "50", False)

    def test_dispute(self):
        self.account.apply(deposit(1, "1.0"))
        self.account.apply(deposit(2, "2.0"))
        self.account.apply(dispute(1))
        self.check_account("2.0", "1.0", "3.0", False)

    def test_dispute_unknown_transaction(self):
        with pytest.raises(UnknownTransactionError):
            self.account.apply(dispute(1))
        self.check_account("0", "0", "0", False)

    def test_dispute_already_disputed(self):
        self.account.apply(deposit(1, "1.0"))
        self.account.apply(dispute(1))
        with pytest.raises(AlreadyDisputedError):
            self.account.apply(dispute(1))
        self.check_account("0", "1.0", "1.0", False)

    def test_dispute_insufficient_funds(self):
        self.account.apply(deposit(1, "2.0"))
        self.account.apply(deposit(2, "3.0"))
        self.account.apply(withdrawal(3, "4.0"))
        with pytest.raises(InsufficientFundsError):
            self.account.apply(dispute(1))
        self.check_account("1.0", "0", "1.0", False)
        assert self.account.store.lookup(1).disputed is False

    def test_resolve(self):
        self.account.apply(deposit(1, "1.0"))
        self.account.apply(deposit(2, "2.0"))
        self.account.apply(dispute(1))
        self.account.apply(resolve(1))
        self.check_account("3.0", "0", "3.0", False)

    def test_resolve_unknown_transaction(self):
        with pytest.raises(UnknownTransactionError):
            self.account.apply(resolve(1))

    def test_resolve_not_disputed(self):
        self.account.apply(deposit(1, "1.0"))
        with pytest.raises(NotDisputedError):
            self.account.apply(resolve(1))
        self.check_account("1.0", "0", "1.0", False)

    def test_redispute_after_resolve(self):
        self.account.apply(deposit(1, "100"))
        self.account.apply(dispute(1))
        self.account.apply(resolve(1))
        self.account.apply(dispute(1))
        self.check_account("0", "100", "100", False)

    def test_chargeback(self):
        self.account.apply(deposit(1, "1.0"))
        self.account.apply(deposit(2, "2.0"))
        self.account.apply(dispute(1))
        self.account.apply(chargeback(1))
        self.check_account("2.0", "0", "2.0", True)

    def test_chargeback_unknown_transaction(self):
        with pytest.raises(UnknownTransactionError):
            self.account.apply(chargeback(1))

    def test_chargeback_not_disputed(self):
        self.account.apply(deposit(1, "1.0"))
        with pytest.raises(NotDisputedError):
            self.account.apply(chargeback(1))
        self.check_account("1.0", "0", "1.0", False)

    def test_chargeback_after_resolve(self):
        self.account.apply(deposit(1, "100"))
        self.account.apply(dispute(1))
        self.account.apply(resolve(1))
        with pytest.raises(NotDisputedError):
            self.account.apply(chargeback(1))
        self.check_account("100", "0", "100", False)

    @pytest.mark.parametrize("transaction", [
        deposit(3, "1.0"),
        withdrawal(3, "1.0"),
        dispute(2),
        resolve(2),
        chargeback(2),
    ])
    def test_locked_account_rejects_everything(self, transaction):
        self.account.apply(deposit(1, "1.0"))
        self.account.apply(deposit(2, "2.0"))
        self.account.apply(dispute(1))
        self.account.apply(chargeback(1))

        with pytest.raises(AccountLockedError):
            self.account.apply(transaction)
        self.check_account("2.0", "0", "2.0", True)

    def test_deposit_overflow(self):
        # The total is bounded even while funds sit in held.
        self.account.apply(Transaction(TransactionType.DEPOSIT, 1, 1, Amount.max_value()))
        self.account.apply(dispute(1))
        with pytest.raises(BalanceOverflowError):
            self.account.apply(deposit(2, "1.0"))
        assert self.account.held == Amount.max_value()
        assert self.account.available == Amount.zero()
        assert 2 not in self.account.store

    def test_summary(self):
        self.account.apply(deposit(1, "10"))
        self.account.apply(dispute(1))
        summary = self.account.summary()
        assert summary.client_id == 1
        assert summary.available == Amount.zero()
        assert summary.held == Amount.parse("10")
        assert summary.total == Amount.parse("10")
        assert summary.locked is False
