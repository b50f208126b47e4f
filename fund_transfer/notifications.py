"""
Notification Module

Email-style transfer confirmations. Notifications are recorded in an
in-memory outbox and logged; nothing is actually delivered.
"""

from decimal import Decimal
from datetime import datetime
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .accounts import AccountSnapshot, DestinationAccount
from .transactions import Transaction, TransactionStatus, TransferType, epoch_millis
from .formatting import destination_label, format_account_number, format_currency
from .logging_config import get_logger, log_action


EXTERNAL_TRANSFER_NOTE = "Note: Transfer to external account may take 1-2 business days"


@dataclass(frozen=True)
class Notification:
    """Confirmation email for one completed transfer"""
    id: int
    to: str
    subject: str
    timestamp: datetime
    transaction_id: str
    amount: Decimal
    source_account: AccountSnapshot
    destination_account: DestinationAccount
    status: TransactionStatus
    transfer_type: TransferType

    @property
    def body(self) -> str:
        """Plain-text email body"""
        lines = [
            "Dear Customer,",
            "Your fund transfer has been completed successfully.",
            "",
            f"Transaction ID: {self.transaction_id}",
            f"Amount: {format_currency(self.amount)}",
            f"From: {self.source_account.name} "
            f"({format_account_number(self.source_account.number)})",
            f"To: {destination_label(self.destination_account)} "
            f"({format_account_number(self.destination_account.number)})",
            f"Status: {self.status.value}",
        ]
        if self.transfer_type == TransferType.EXTERNAL:
            lines.extend(["", EXTERNAL_TRANSFER_NOTE])
        return "\n".join(lines)


def build_transfer_notification(
    transaction: Transaction,
    notification_id: int,
    recipient: str,
    subject: str
) -> Notification:
    """Copy a transaction's key fields into a confirmation notification"""
    return Notification(
        id=notification_id,
        to=recipient,
        subject=subject,
        timestamp=transaction.timestamp,
        transaction_id=transaction.id,
        amount=transaction.amount,
        source_account=transaction.source_account,
        destination_account=transaction.destination_account,
        status=transaction.status,
        transfer_type=transaction.type
    )


class NotificationOutbox:
    """
    Records sent notifications, most recent first

    Notification ids come from the wall clock in milliseconds and are
    bumped when needed so they strictly increase.
    """

    def __init__(self, recipient: str, subject: str):
        self.recipient = recipient
        self.subject = subject
        self._notifications: List[Notification] = []
        self._last_id: Optional[int] = None
        self.logger = get_logger("fund_transfer.notifications")

    def __len__(self) -> int:
        return len(self._notifications)

    def __iter__(self) -> Iterator[Notification]:
        return iter(tuple(self._notifications))

    def _next_id(self, moment: datetime) -> int:
        candidate = epoch_millis(moment)
        if self._last_id is not None and candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def notify_transfer(self, transaction: Transaction) -> Notification:
        """Build, record and log the confirmation for a transaction"""
        notification = build_transfer_notification(
            transaction,
            notification_id=self._next_id(transaction.timestamp),
            recipient=self.recipient,
            subject=self.subject
        )
        self._notifications.insert(0, notification)

        log_action(
            self.logger, "info",
            f"EMAIL to {notification.to}: {notification.subject}",
            action="notification_recorded",
            resource=notification.transaction_id,
            extra={"notification_id": notification.id}
        )
        return notification

    def all(self) -> Tuple[Notification, ...]:
        return tuple(self._notifications)

    def for_transaction(self, transaction_id: str) -> List[Notification]:
        return [n for n in self._notifications if n.transaction_id == transaction_id]
