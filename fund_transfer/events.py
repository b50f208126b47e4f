"""
Event System Module

Observer-style publish/subscribe so callers (a UI, the HTTP layer, tests)
can react to ledger changes without the engine knowing about them.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid
import logging
from threading import RLock


class DomainEvent(Enum):
    """Domain events raised by the ledger engine"""
    TRANSFER_PROCESSED = "transfer.processed"
    TRANSFER_REJECTED = "transfer.rejected"
    ACCOUNT_BALANCE_CHANGED = "account.balance_changed"
    NOTIFICATION_RECORDED = "notification.recorded"


@dataclass
class EventPayload:
    """Payload for domain events"""
    event_type: DomainEvent
    entity_type: str
    entity_id: str
    data: Dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'event_type': self.event_type.value,
            'entity_type': self.entity_type,
            'entity_id': self.entity_id,
            'data': self.data,
            'timestamp': self.timestamp.isoformat(),
            'event_id': self.event_id
        }


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__name__", repr(handler))


class EventDispatcher:
    """Central event dispatcher, publish/subscribe pattern"""

    def __init__(self):
        self._handlers: Dict[DomainEvent, List[Callable]] = {}
        self._global_handlers: List[Callable] = []  # catch-all handlers
        self._lock = RLock()
        self.logger = logging.getLogger("fund_transfer.events")

    def subscribe(self, event_type: DomainEvent, handler: Callable) -> None:
        """Subscribe to a specific event type"""
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
            self.logger.debug(f"Subscribed handler {_handler_name(handler)} to {event_type.value}")

    def subscribe_all(self, handler: Callable) -> None:
        """Subscribe to ALL events"""
        with self._lock:
            self._global_handlers.append(handler)
            self.logger.debug(f"Subscribed global handler {_handler_name(handler)}")

    def unsubscribe(self, event_type: DomainEvent, handler: Callable) -> None:
        """Unsubscribe from a specific event type"""
        with self._lock:
            try:
                self._handlers.get(event_type, []).remove(handler)
            except ValueError:
                self.logger.warning(f"Handler {_handler_name(handler)} was not subscribed to {event_type.value}")

    def unsubscribe_all(self, handler: Callable) -> None:
        """Remove a catch-all handler"""
        with self._lock:
            try:
                self._global_handlers.remove(handler)
            except ValueError:
                self.logger.warning(f"Global handler {_handler_name(handler)} was not subscribed")

    def publish(self, event: EventPayload) -> None:
        """Publish event to all subscribers"""
        with self._lock:
            handlers = list(self._handlers.get(event.event_type, [])) + list(self._global_handlers)

        self.logger.debug(f"Publishing event {event.event_type.value} for {event.entity_type}:{event.entity_id}")
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                # Log but don't break the transfer
                self.logger.error(
                    f"Error in event handler {_handler_name(handler)} for {event.event_type.value}: {e}"
                )

    def clear(self) -> None:
        """Clear all handlers"""
        with self._lock:
            self._handlers.clear()
            self._global_handlers.clear()

    def get_handler_count(self, event_type: Optional[DomainEvent] = None) -> int:
        """Get count of handlers for a specific event type or all"""
        with self._lock:
            if event_type:
                return len(self._handlers.get(event_type, []))
            total = sum(len(handlers) for handlers in self._handlers.values())
            return total + len(self._global_handlers)


def create_transfer_event(event_type: DomainEvent, transaction) -> EventPayload:
    """Create an event describing a processed transfer"""
    return EventPayload(
        event_type=event_type,
        entity_type="transaction",
        entity_id=transaction.id,
        data={
            "amount": str(transaction.amount),
            "type": transaction.type.value,
            "status": transaction.status.value,
            "source_account_id": transaction.source_account.id,
            "destination_account_number": transaction.destination_account.number,
        }
    )


def create_balance_event(account, previous_balance) -> EventPayload:
    """Create an event for a change in a live account balance"""
    return EventPayload(
        event_type=DomainEvent.ACCOUNT_BALANCE_CHANGED,
        entity_type="account",
        entity_id=account.id,
        data={
            "previous_balance": str(previous_balance),
            "balance": str(account.balance),
        }
    )


def create_notification_event(notification) -> EventPayload:
    """Create an event for a recorded notification"""
    return EventPayload(
        event_type=DomainEvent.NOTIFICATION_RECORDED,
        entity_type="notification",
        entity_id=str(notification.id),
        data={
            "to": notification.to,
            "subject": notification.subject,
            "transaction_id": notification.transaction_id,
        }
    )


def create_rejection_event(result, source_id: str) -> EventPayload:
    """Create an event for a transfer turned away by validation"""
    return EventPayload(
        event_type=DomainEvent.TRANSFER_REJECTED,
        entity_type="account",
        entity_id=source_id or "",
        data={
            "code": result.code.value,
            "message": result.message,
        }
    )
