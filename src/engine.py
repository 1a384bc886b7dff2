import logging
from typing import Iterable, Optional

from errors import ClientError
from ledger import Ledger
from models import ProcessingStats, Transaction
from transaction_csv import read_transactions

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Feeds a transaction stream into a Ledger, strictly in arrival order.

    Rejected transactions are logged and counted, then skipped. A malformed
    input row (TransactionParseError) is not caught here and ends the run.
    """

    def __init__(self, ledger: Optional[Ledger] = None):
        self.ledger = ledger if ledger is not None else Ledger()
        self.stats = ProcessingStats()

    def process_file(self, filepath: str) -> Ledger:
        """Process CSV file and return the ledger holding final account states."""
        logger.info(f"Processing transactions from {filepath}")
        with open(filepath, "r", encoding="utf-8-sig", newline="") as f:
            return self.process_transactions(read_transactions(f))

    def process_transactions(self, transactions: Iterable[Transaction]) -> Ledger:
        for transaction in transactions:
            try:
                self.ledger.apply(transaction)
            except ClientError as e:
                # Rejected transactions are skipped; the account is unchanged.
                self.stats.record_failure(e.code)
                logger.warning(f"Rejected {transaction}: {e} ({e.code})")
            else:
                self.stats.record_success()

        logger.info(
            f"Processed: {self.stats.processed}, "
            f"Failed: {self.stats.failed}, "
            f"Accounts: {len(self.ledger)}"
        )
        return self.ledger
