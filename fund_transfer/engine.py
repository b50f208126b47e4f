"""
Ledger Engine Module

The single stateful component of the simulator. Owns the account registry,
the transaction history and the notification outbox for one user session,
validates transfer requests and applies them.

Each engine is independent; create one per application session (or per
test) rather than sharing module-level state.
"""

from decimal import Decimal
from datetime import datetime
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union
from threading import RLock

from .config import TransferConfig, get_config
from .accounts import (
    Account, AccountRegistry, AccountSnapshot, DestinationAccount
)
from .currency import parse_amount
from .transactions import (
    Transaction, TransactionHistory, TransactionIdGenerator,
    TransactionStatus, TransferType
)
from .notifications import Notification, NotificationOutbox
from .validation import TransferValidationError, TransferValidator, ValidationResult
from .events import (
    EventDispatcher, EventPayload, DomainEvent, create_balance_event,
    create_notification_event, create_rejection_event, create_transfer_event
)
from .logging_config import get_logger, log_action


# A transfer of exactly this amount is charged a flat surcharge on top
SURCHARGE_TRIGGER_AMOUNT = Decimal("1000")
SURCHARGE_AMOUNT = Decimal("100")


def deduction_for(amount: Decimal) -> Decimal:
    """Amount taken from the source account for a requested transfer"""
    if amount == SURCHARGE_TRIGGER_AMOUNT:
        return amount + SURCHARGE_AMOUNT
    return amount


def local_now() -> datetime:
    return datetime.now().astimezone()


class LedgerEngine:
    """
    In-memory ledger for one demo banking session

    Exposes read-only views of accounts and history; balances change only
    through ``process_transfer`` (or ``transfer``, which validates first).
    """

    def __init__(
        self,
        config: Optional[TransferConfig] = None,
        accounts: Optional[List[Account]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        event_dispatcher: Optional[EventDispatcher] = None
    ):
        self.config = config or get_config()
        self._clock = clock or local_now
        self._lock = RLock()
        self.logger = get_logger("fund_transfer.engine")

        self._accounts = AccountRegistry(accounts)
        self._transactions = TransactionHistory()
        self._outbox = NotificationOutbox(
            recipient=self.config.user_email,
            subject=self.config.notification_subject
        )
        self._id_generator = TransactionIdGenerator()
        self._validator = TransferValidator(
            self._accounts,
            min_amount=self.config.min_amount,
            max_amount=self.config.max_amount,
            valid_external_accounts=self.config.valid_external_accounts
        )

        self.events = event_dispatcher or EventDispatcher()
        if self.config.enable_event_logging:
            self.events.subscribe_all(self._log_event)

    # Read-only state

    @property
    def accounts(self) -> List[AccountSnapshot]:
        with self._lock:
            return self._accounts.snapshots()

    def get_account(self, account_id: str) -> Optional[AccountSnapshot]:
        with self._lock:
            account = self._accounts.find(account_id)
            return account.snapshot() if account else None

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        """Transaction history, most recent first"""
        return self._transactions.all()

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    @property
    def notifications(self) -> Tuple[Notification, ...]:
        """Notification history, most recent first"""
        return self._outbox.all()

    def notifications_for(self, transaction_id: str) -> List[Notification]:
        """Notifications sent for one transaction"""
        return self._outbox.for_transaction(transaction_id)

    @property
    def min_amount(self) -> Decimal:
        return self.config.min_amount

    @property
    def max_amount(self) -> Decimal:
        return self.config.max_amount

    @property
    def valid_external_accounts(self) -> List[str]:
        return list(self.config.valid_external_accounts)

    @property
    def user_email(self) -> str:
        return self.config.user_email

    # Operations

    def generate_transaction_id(self) -> str:
        """Build a ``TXN<YYYYMMDD><6 digits>`` id from the current clock"""
        return self._id_generator.next_id(self._clock())

    def validate_transfer(
        self,
        source_id: str,
        dest_type: Union[str, TransferType],
        dest_id: str,
        external_account_number: str,
        amount_text: str
    ) -> ValidationResult:
        """
        Check a transfer request without changing anything

        Returns:
            ValidationResult.ok() or the first failing rule
        """
        with self._lock:
            return self._validator.validate(
                source_id, dest_type, dest_id, external_account_number, amount_text
            )

    def process_transfer(
        self,
        source_id: str,
        dest_type: Union[str, TransferType],
        dest_id: str,
        external_account_number: str,
        amount_text: str
    ) -> Transaction:
        """
        Apply a transfer that has already passed validation

        A requested amount of exactly 1000 deducts 1100 from the source;
        the transaction still records, and the destination still receives,
        the requested amount.

        Returns:
            The recorded Transaction

        Raises:
            AccountNotFoundError: If the source, or the destination of an own
                transfer, is not a known account
            ValueError: If dest_type or amount_text cannot be parsed
        """
        with self._lock:
            applied = self._apply_transfer(
                source_id, dest_type, dest_id, external_account_number, amount_text
            )
        return self._announce(applied)

    def transfer(
        self,
        source_id: str,
        dest_type: Union[str, TransferType],
        dest_id: str,
        external_account_number: str,
        amount_text: str
    ) -> Transaction:
        """
        Validate and apply a transfer as one atomic step

        Events are published after the engine lock is released.

        Raises:
            TransferValidationError: If the request fails validation; nothing
                is changed in that case
        """
        with self._lock:
            result = self._validator.validate(
                source_id, dest_type, dest_id, external_account_number, amount_text
            )
            applied = None
            if result.is_valid:
                applied = self._apply_transfer(
                    source_id, dest_type, dest_id, external_account_number, amount_text
                )

        if applied is not None:
            return self._announce(applied)

        log_action(
            self.logger, "warning", f"Transfer rejected: {result.message}",
            action="transfer_rejected",
            resource=source_id,
            extra={"code": result.code.value}
        )
        self.events.publish(create_rejection_event(result, source_id))
        raise TransferValidationError(result)

    def _apply_transfer(
        self,
        source_id: str,
        dest_type: Union[str, TransferType],
        dest_id: str,
        external_account_number: str,
        amount_text: str
    ) -> '_AppliedTransfer':
        """Mutate the ledger; caller must hold the engine lock"""
        transfer_type = TransferType.parse(dest_type)
        amount = parse_amount(amount_text)

        source = self._accounts.require(source_id)
        target = None
        if transfer_type == TransferType.OWN:
            target = self._accounts.require(dest_id)

        now = self._clock()
        transaction_id = self._id_generator.next_id(now)

        source_before = source.balance
        source.debit(deduction_for(amount))

        if target is not None:
            target_before = target.balance
            target.credit(amount)
            destination = DestinationAccount.from_account(target)
        else:
            destination = DestinationAccount.external(external_account_number)

        transaction = Transaction(
            id=transaction_id,
            source_account=source.snapshot(),
            destination_account=destination,
            amount=amount,
            timestamp=now,
            type=transfer_type,
            status=TransactionStatus.SUCCESSFUL
        )
        self._transactions.record(transaction)
        notification = self._outbox.notify_transfer(transaction)

        balance_events = [create_balance_event(source, source_before)]
        if target is not None:
            balance_events.append(create_balance_event(target, target_before))

        return _AppliedTransfer(
            transaction=transaction,
            notification=notification,
            balance_events=balance_events,
            deducted=source_before - source.balance
        )

    def _announce(self, applied: '_AppliedTransfer') -> Transaction:
        """Log and publish a transfer applied under the lock"""
        transaction = applied.transaction
        log_action(
            self.logger, "info", f"Transfer processed: {transaction.id}",
            action="transfer_processed",
            resource=transaction.source_account.id,
            correlation_id=transaction.id,
            extra={
                "type": transaction.type.value,
                "amount": str(transaction.amount),
                "deducted": str(applied.deducted),
                "destination": transaction.destination_account.number,
            }
        )

        for event in applied.balance_events:
            self.events.publish(event)
        self.events.publish(create_transfer_event(DomainEvent.TRANSFER_PROCESSED, transaction))
        self.events.publish(create_notification_event(applied.notification))

        return transaction

    def _log_event(self, event: EventPayload) -> None:
        self.logger.debug(f"Event {event.event_type.value} for {event.entity_type}:{event.entity_id}")


@dataclass(frozen=True)
class _AppliedTransfer:
    """Result of a ledger mutation waiting to be logged and published"""
    transaction: Transaction
    notification: Notification
    balance_events: List[EventPayload]
    deducted: Decimal
