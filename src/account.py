import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from amount import Amount, AmountOverflowError
from errors import (
    AccountLockedError,
    AlreadyDisputedError,
    BalanceOverflowError,
    ChargedBackError,
    InsufficientFundsError,
    InvalidAmountError,
    MissingAmountError,
    NotDisputedError,
    UnknownTransactionError,
)
from models import AccountSummary, Transaction, TransactionType
from transaction_store import StoredDeposit, TransactionStore

logger = logging.getLogger(__name__)


@contextmanager
def _balance_arithmetic(transaction_id: int) -> Iterator[None]:
    try:
        yield
    except AmountOverflowError as e:
        raise BalanceOverflowError(transaction_id=transaction_id, detail=str(e)) from e


class ClientAccount:
    """
    Balances and deposit history for one client.

    Each handler computes the new balances first and only assigns them once
    every check has passed, so a rejected transaction never leaves the
    account half-updated.

    Invariants after every call:
        available >= 0, held >= 0
        held == sum of currently disputed deposits
        available + held fits in an Amount
    """

    def __init__(self, client_id: int):
        self.client_id = client_id
        self.available = Amount.zero()
        self.held = Amount.zero()
        self.locked = False
        self.store = TransactionStore()

    def __repr__(self) -> str:
        return f"ClientAccount(client={self.client_id}, available={self.available}, held={self.held}, locked={self.locked})"

    @property
    def total(self) -> Amount:
        return self.available.add(self.held)

    def summary(self) -> AccountSummary:
        return AccountSummary(
            client_id=self.client_id,
            available=self.available,
            held=self.held,
            total=self.total,
            locked=self.locked,
        )

    def apply(self, transaction: Transaction) -> None:
        """
        Apply a single transaction to this account.

        Raises a ClientError subclass if the transaction is rejected. In that
        case the account is unchanged.
        """
        if self.locked:
            raise AccountLockedError(transaction_id=transaction.transaction_id)

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._deposit(transaction.transaction_id, transaction.amount)
            case TransactionType.WITHDRAWAL:
                self._withdraw(transaction.transaction_id, transaction.amount)
            case TransactionType.DISPUTE:
                self._dispute(transaction.transaction_id)
            case TransactionType.RESOLVE:
                self._resolve(transaction.transaction_id)
            case TransactionType.CHARGEBACK:
                self._chargeback(transaction.transaction_id)
            case _:
                raise ValueError(f"unsupported transaction type: {transaction.transaction_type!r}")

    def _deposit(self, transaction_id: int, amount: Optional[Amount]) -> None:
        amount = self._require_amount(transaction_id, amount)

        # Bounding the total means moving funds between available and held
        # can never overflow afterwards.
        with _balance_arithmetic(transaction_id):
            self.total.add(amount)
            available = self.available.add(amount)

        self.store.record_deposit(transaction_id, amount)
        self.available = available

    def _withdraw(self, transaction_id: int, amount: Optional[Amount]) -> None:
        amount = self._require_amount(transaction_id, amount)

        if self.available < amount:
            raise InsufficientFundsError(
                transaction_id=transaction_id,
                detail=f"requested {amount}, available {self.available}",
            )
        with _balance_arithmetic(transaction_id):
            self.available = self.available.sub(amount)

    def _dispute(self, transaction_id: int) -> None:
        deposit = self._stored_deposit(transaction_id)
        if deposit.charged_back:
            raise ChargedBackError(transaction_id=transaction_id)
        if deposit.disputed:
            raise AlreadyDisputedError(transaction_id=transaction_id)

        # A deposit can't be held if part of it has already been withdrawn.
        if self.available < deposit.amount:
            raise InsufficientFundsError(
                transaction_id=transaction_id,
                detail=f"dispute of {deposit.amount}, available {self.available}",
            )
        with _balance_arithmetic(transaction_id):
            available = self.available.sub(deposit.amount)
            held = self.held.add(deposit.amount)

        self.store.mark_disputed(transaction_id)
        self.available = available
        self.held = held

    def _resolve(self, transaction_id: int) -> None:
        deposit = self._stored_deposit(transaction_id)
        if not deposit.disputed:
            raise NotDisputedError(transaction_id=transaction_id)

        with _balance_arithmetic(transaction_id):
            held = self.held.sub(deposit.amount)
            available = self.available.add(deposit.amount)

        self.store.mark_resolved(transaction_id)
        self.held = held
        self.available = available

    def _chargeback(self, transaction_id: int) -> None:
        deposit = self._stored_deposit(transaction_id)
        if not deposit.disputed:
            raise NotDisputedError(transaction_id=transaction_id)

        # Held funds are returned to the payer, not to available.
        with _balance_arithmetic(transaction_id):
            held = self.held.sub(deposit.amount)

        self.store.mark_charged_back(transaction_id)
        self.held = held
        self.locked = True
        logger.info(f"Client {self.client_id}: account locked after chargeback of tx {transaction_id}")

    def _stored_deposit(self, transaction_id: int) -> StoredDeposit:
        deposit = self.store.lookup(transaction_id)
        if deposit is None:
            raise UnknownTransactionError(transaction_id=transaction_id)
        return deposit

    @staticmethod
    def _require_amount(transaction_id: int, amount: Optional[Amount]) -> Amount:
        if amount is None:
            raise MissingAmountError(transaction_id=transaction_id)
        if amount.is_negative():
            raise InvalidAmountError(transaction_id=transaction_id, detail=str(amount))
        return amount
