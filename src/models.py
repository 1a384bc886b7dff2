from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from amount import Amount

CLIENT_ID_MAX = 65535
TRANSACTION_ID_MAX = 4294967295


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Amount] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class AccountSummary:
    """One row of the final report."""

    client_id: int
    available: Amount
    held: Amount
    total: Amount
    locked: bool


@dataclass
class ProcessingStats:
    """Counters for a single run."""

    processed: int = 0
    failed: int = 0
    failures_by_code: Counter = field(default_factory=Counter)

    def record_success(self) -> None:
        self.processed += 1

    def record_failure(self, code: str) -> None:
        self.failed += 1
        self.failures_by_code[code] += 1
