"""
Transaction Records Module

Transaction records produced by completed fund transfers, the generator for
human-readable transaction ids, and the most-recent-first transaction history.
"""

from decimal import Decimal
from datetime import datetime, timedelta, timezone
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple
from enum import Enum

from .accounts import AccountSnapshot, DestinationAccount


class TransferType(Enum):
    """Where a transfer is headed"""
    OWN = "own"            # Between two of the user's own accounts
    EXTERNAL = "external"  # Out to a whitelisted external account

    @classmethod
    def parse(cls, value) -> 'TransferType':
        """
        Accept either a TransferType or its string value

        Raises:
            ValueError: If the value names no transfer type
        """
        if isinstance(value, cls):
            return value
        return cls(value)


class TransactionStatus(Enum):
    """States of a recorded transaction"""
    SUCCESSFUL = "Successful"


@dataclass(frozen=True)
class Transaction:
    """
    Completed fund transfer

    ``source_account`` is a snapshot taken after the deduction and
    ``amount`` is the requested amount, not what was deducted.
    """
    id: str
    source_account: AccountSnapshot
    destination_account: DestinationAccount
    amount: Decimal
    timestamp: datetime
    type: TransferType
    status: TransactionStatus = TransactionStatus.SUCCESSFUL

    @property
    def is_external(self) -> bool:
        return self.type == TransferType.EXTERNAL


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def epoch_millis(moment: datetime) -> int:
    """Milliseconds since the Unix epoch; naive datetimes are taken as local time"""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return (moment - _EPOCH) // timedelta(milliseconds=1)


class TransactionIdGenerator:
    """
    Builds ids of the form ``TXN<YYYYMMDD><last 6 digits of epoch ms>``

    The millisecond reading never goes backwards or repeats within one
    generator, so ids issued in the same millisecond still differ.
    """

    PREFIX = "TXN"
    SUFFIX_DIGITS = 6

    def __init__(self):
        self._last_millis: Optional[int] = None

    def next_id(self, moment: datetime) -> str:
        reading = epoch_millis(moment)
        millis = reading
        if self._last_millis is not None and millis <= self._last_millis:
            millis = self._last_millis + 1
        self._last_millis = millis

        # The date comes from the bumped reading too
        effective = moment + timedelta(milliseconds=millis - reading)
        suffix = str(millis)[-self.SUFFIX_DIGITS:].zfill(self.SUFFIX_DIGITS)
        return f"{self.PREFIX}{effective.strftime('%Y%m%d')}{suffix}"


class TransactionHistory:
    """Append-only transaction log, most recent first"""

    def __init__(self):
        self._transactions = []

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(tuple(self._transactions))

    def record(self, transaction: Transaction) -> None:
        self._transactions.insert(0, transaction)

    def all(self) -> Tuple[Transaction, ...]:
        return tuple(self._transactions)

    def get(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None
