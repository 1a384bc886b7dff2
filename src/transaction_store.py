from dataclasses import dataclass
from typing import Dict, Optional

from amount import Amount
from errors import (
    AlreadyDisputedError,
    ChargedBackError,
    DuplicateTransactionError,
    NotDisputedError,
    UnknownTransactionError,
)


@dataclass
class StoredDeposit:
    amount: Amount
    disputed: bool = False
    charged_back: bool = False


class TransactionStore:
    """
    Deposit history for a single client, kept for dispute lookups.

    Entries are added on deposit and never removed, so a dispute can refer to a
    deposit of any age. Withdrawals are not stored and can't be disputed.
    The store only tracks dispute state; balances belong to the account.
    """

    def __init__(self):
        self._deposits: Dict[int, StoredDeposit] = {}

    def __len__(self) -> int:
        return len(self._deposits)

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._deposits

    def record_deposit(self, transaction_id: int, amount: Amount) -> None:
        if transaction_id in self._deposits:
            raise DuplicateTransactionError(transaction_id=transaction_id)
        self._deposits[transaction_id] = StoredDeposit(amount=amount)

    def lookup(self, transaction_id: int) -> Optional[StoredDeposit]:
        return self._deposits.get(transaction_id)

    def mark_disputed(self, transaction_id: int) -> None:
        deposit = self._get(transaction_id)
        if deposit.charged_back:
            raise ChargedBackError(transaction_id=transaction_id)
        if deposit.disputed:
            raise AlreadyDisputedError(transaction_id=transaction_id)
        deposit.disputed = True

    def mark_resolved(self, transaction_id: int) -> None:
        deposit = self._get(transaction_id)
        if not deposit.disputed:
            raise NotDisputedError(transaction_id=transaction_id)
        deposit.disputed = False

    def mark_charged_back(self, transaction_id: int) -> None:
        deposit = self._get(transaction_id)
        if not deposit.disputed:
            raise NotDisputedError(transaction_id=transaction_id)
        deposit.disputed = False
        deposit.charged_back = True

    def held_amount(self) -> Amount:
        """Sum of every currently disputed deposit."""
        total = Amount.zero()
        for deposit in self._deposits.values():
            if deposit.disputed:
                total = total.add(deposit.amount)
        return total

    def _get(self, transaction_id: int) -> StoredDeposit:
        deposit = self._deposits.get(transaction_id)
        if deposit is None:
            raise UnknownTransactionError(transaction_id=transaction_id)
        return deposit
