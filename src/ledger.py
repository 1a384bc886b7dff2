from typing import Dict, Iterator, Optional

from account import ClientAccount
from models import AccountSummary, Transaction


class Ledger:
    """
    All client accounts for one run.

    Built empty by the caller, fed transactions in arrival order, then read
    once through snapshot(). Accounts never interact, so the client id is the
    only safe unit if this is ever partitioned.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        account = self._accounts.get(client_id)
        if account is None:
            account = ClientAccount(client_id)
            self._accounts[client_id] = account
        return account

    def apply(self, transaction: Transaction) -> None:
        """
        Route a transaction to its client's account.

        The account is created on first sight of a client id, even if the
        transaction is then rejected. Any ClientError propagates to the caller,
        which decides what to do with it.
        """
        account = self.get_or_create_account(transaction.client_id)
        account.apply(transaction)

    def snapshot(self) -> Iterator[AccountSummary]:
        """Yield one summary per client, ordered by client id."""
        for client_id in sorted(self._accounts):
            yield self._accounts[client_id].summary()
