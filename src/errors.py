"""
Exceptions raised while applying transactions.

ClientError and its subclasses are per-transaction failures: the transaction
is skipped, the account is left untouched and processing carries on. Each
class has a machine-readable `code` so callers can count or report failures
without matching on message text.

TransactionParseError is different: it means the input itself is malformed
and the run must stop.
"""

from typing import Optional


class ClientError(Exception):
    """Base class for recoverable, per-transaction failures."""

    code: str = "CLIENT_ERROR"
    message: str = "transaction rejected"

    def __init__(self, transaction_id: Optional[int] = None, detail: str = ""):
        self.transaction_id = transaction_id
        self.detail = detail
        text = self.message
        if detail:
            text = f"{text}: {detail}"
        super().__init__(text)


class DuplicateTransactionError(ClientError):
    code = "DUPLICATE_TRANSACTION"
    message = "duplicate transaction id"


class UnknownTransactionError(ClientError):
    code = "UNKNOWN_TRANSACTION"
    message = "unknown transaction id"


class AlreadyDisputedError(ClientError):
    code = "ALREADY_DISPUTED"
    message = "transaction already disputed"


class NotDisputedError(ClientError):
    code = "NOT_DISPUTED"
    message = "transaction not disputed"


class ChargedBackError(ClientError):
    code = "CHARGED_BACK"
    message = "transaction already charged back"


class InsufficientFundsError(ClientError):
    code = "INSUFFICIENT_FUNDS"
    message = "insufficient available funds"


class InvalidAmountError(ClientError):
    code = "INVALID_AMOUNT"
    message = "amount must not be negative"


class MissingAmountError(ClientError):
    code = "MISSING_AMOUNT"
    message = "amount is required"


class BalanceOverflowError(ClientError):
    code = "BALANCE_OVERFLOW"
    message = "balance would overflow"


class AccountLockedError(ClientError):
    code = "ACCOUNT_LOCKED"
    message = "account is locked"


class TransactionParseError(ValueError):
    """A malformed input row. Fatal for the whole run."""

    def __init__(self, line_number: int, reason: str):
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"invalid transaction at line {line_number}: {reason}")
