"""
Account Management Module

Holds the user's own accounts and their live balances, plus the frozen
snapshots that get embedded into transaction and notification history.
Live accounts are mutated only by the ledger engine; history records only
ever carry snapshots.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .currency import to_amount


EXTERNAL_ACCOUNT_TYPE = "External Account"


class AccountNotFoundError(LookupError):
    """Raised when an account id does not resolve to a known account"""

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account {account_id!r} not found")


@dataclass(frozen=True)
class AccountSnapshot:
    """Immutable copy of an account as it was at a point in time"""
    id: str
    name: str
    type: str
    number: str
    balance: Decimal


@dataclass
class Account:
    """
    One of the user's own bank accounts

    Only ``balance`` changes after creation.
    """
    id: str
    name: str
    type: str
    number: str
    balance: Decimal

    def __post_init__(self):
        self.balance = to_amount(self.balance)

    def snapshot(self) -> AccountSnapshot:
        """Freeze the current state of this account"""
        return AccountSnapshot(
            id=self.id,
            name=self.name,
            type=self.type,
            number=self.number,
            balance=self.balance
        )

    def debit(self, amount: Decimal) -> None:
        self.balance -= amount

    def credit(self, amount: Decimal) -> None:
        self.balance += amount


@dataclass(frozen=True)
class DestinationAccount:
    """Where a transfer went, as recorded in history"""
    number: str
    type: str
    name: str = ""

    @classmethod
    def from_account(cls, account: Account) -> 'DestinationAccount':
        """Snapshot one of the user's own accounts as a destination"""
        return cls(name=account.name, number=account.number, type=account.type)

    @classmethod
    def external(cls, number: str) -> 'DestinationAccount':
        """Destination outside the system; name is unknown"""
        return cls(name="", number=number, type=EXTERNAL_ACCOUNT_TYPE)

    @property
    def is_external(self) -> bool:
        return self.type == EXTERNAL_ACCOUNT_TYPE


def default_accounts() -> List[Account]:
    """Seed accounts every new engine starts with"""
    return [
        Account("A", "Account A", "Savings", "1111222233", Decimal("10000.00")),
        Account("B", "Account B", "Checking", "4444555566", Decimal("5000.00")),
        Account("C", "Account C", "Savings", "7777999988", Decimal("2000.00")),
    ]


class AccountRegistry:
    """
    Ordered registry of live accounts keyed by id
    """

    def __init__(self, accounts: Optional[Iterable[Account]] = None):
        self._accounts: Dict[str, Account] = {}
        for account in (default_accounts() if accounts is None else accounts):
            if account.id in self._accounts:
                raise ValueError(f"Duplicate account id {account.id!r}")
            self._accounts[account.id] = account

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, account_id: str) -> bool:
        return account_id in self._accounts

    def find(self, account_id: str) -> Optional[Account]:
        """Look up a live account, None when unknown"""
        return self._accounts.get(account_id)

    def require(self, account_id: str) -> Account:
        """
        Look up a live account that must exist

        Raises:
            AccountNotFoundError: If the id is unknown
        """
        account = self._accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def snapshots(self) -> List[AccountSnapshot]:
        """Snapshots of all accounts in creation order"""
        return [account.snapshot() for account in self._accounts.values()]
