"""
Tests for Notification Module

Tests building confirmations from transactions, the rendered email body,
and the outbox ordering and ids.
"""

import logging
import pytest
from datetime import datetime, timezone
from decimal import Decimal

from fund_transfer.accounts import AccountSnapshot, DestinationAccount
from fund_transfer.notifications import (
    EXTERNAL_TRANSFER_NOTE, NotificationOutbox, build_transfer_notification
)
from fund_transfer.transactions import Transaction, TransactionStatus, TransferType


MOMENT = datetime(2026, 10, 19, 0, 0, 0, 123000, tzinfo=timezone.utc)
SOURCE = AccountSnapshot("A", "Account A", "Savings", "1111222233", Decimal("9500"))


def make_transaction(transaction_id="TXN20261019000123", transfer_type=TransferType.OWN,
                     amount="500", moment=MOMENT) -> Transaction:
    if transfer_type == TransferType.OWN:
        destination = DestinationAccount(name="Account B", number="4444555566", type="Checking")
    else:
        destination = DestinationAccount.external("1234567890")
    return Transaction(
        id=transaction_id,
        source_account=SOURCE,
        destination_account=destination,
        amount=Decimal(amount),
        timestamp=moment,
        type=transfer_type
    )


@pytest.fixture
def outbox():
    return NotificationOutbox(recipient="testuser@example.com", subject="Fund Transfer Confirmation")


class TestBuildNotification:
    """Test copying transaction fields into a notification"""

    def test_fields_copied(self):
        transaction = make_transaction()
        notification = build_transfer_notification(
            transaction, notification_id=42, recipient="me@example.com", subject="Hello"
        )

        assert notification.id == 42
        assert notification.to == "me@example.com"
        assert notification.subject == "Hello"
        assert notification.timestamp == transaction.timestamp
        assert notification.transaction_id == transaction.id
        assert notification.amount == Decimal("500")
        assert notification.source_account is transaction.source_account
        assert notification.destination_account is transaction.destination_account
        assert notification.status == TransactionStatus.SUCCESSFUL
        assert notification.transfer_type == TransferType.OWN

    def test_body_for_own_transfer(self):
        notification = build_transfer_notification(
            make_transaction(), notification_id=1, recipient="x", subject="y"
        )

        assert notification.body == (
            "Dear Customer,\n"
            "Your fund transfer has been completed successfully.\n"
            "\n"
            "Transaction ID: TXN20261019000123\n"
            "Amount: P500.00\n"
            "From: Account A (Acc# 1111222233)\n"
            "To: Account B (Acc# 4444555566)\n"
            "Status: Successful"
        )

    def test_body_for_external_transfer(self):
        notification = build_transfer_notification(
            make_transaction(transfer_type=TransferType.EXTERNAL, amount="1000"),
            notification_id=1, recipient="x", subject="y"
        )

        assert "Amount: P1,000.00" in notification.body
        assert "To: External Account (Acc# 1234567890)" in notification.body
        assert notification.body.endswith(EXTERNAL_TRANSFER_NOTE)


class TestNotificationOutbox:
    """Test the in-memory outbox"""

    def test_notify_records_most_recent_first(self, outbox):
        outbox.notify_transfer(make_transaction("TXN1"))
        outbox.notify_transfer(make_transaction("TXN2"))

        assert [n.transaction_id for n in outbox.all()] == ["TXN2", "TXN1"]
        assert len(outbox) == 2
        assert outbox.for_transaction("TXN1")[0].to == "testuser@example.com"
        assert outbox.for_transaction("TXN9") == []

    def test_ids_from_clock_and_strictly_increasing(self, outbox):
        first = outbox.notify_transfer(make_transaction("TXN1"))
        second = outbox.notify_transfer(make_transaction("TXN2"))

        assert first.id == 1792368000123
        assert second.id == 1792368000124

    def test_notification_logged(self, outbox, caplog):
        with caplog.at_level(logging.INFO, logger="fund_transfer.notifications"):
            outbox.notify_transfer(make_transaction("TXN1"))

        assert "EMAIL to testuser@example.com: Fund Transfer Confirmation" in caplog.text
        record = caplog.records[-1]
        assert record.action == "notification_recorded"
        assert record.resource == "TXN1"

    def test_empty_outbox(self, outbox):
        assert outbox.all() == ()
        assert list(outbox) == []
