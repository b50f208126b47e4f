"""
Pydantic schemas for API requests and responses
"""

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from .accounts import AccountSnapshot, DestinationAccount
from .transactions import Transaction
from .notifications import Notification
from .validation import ValidationResult
from .formatting import account_summary, format_currency, format_datetime


class AccountResponse(BaseModel):
    id: str
    name: str
    type: str
    number: str
    balance: str = Field(..., description="Decimal amount as string")
    balance_display: str
    summary: str

    @classmethod
    def from_snapshot(cls, account: AccountSnapshot) -> 'AccountResponse':
        return cls(
            id=account.id,
            name=account.name,
            type=account.type,
            number=account.number,
            balance=str(account.balance),
            balance_display=format_currency(account.balance),
            summary=account_summary(account)
        )


class DestinationAccountResponse(BaseModel):
    name: str
    number: str
    type: str

    @classmethod
    def from_destination(cls, destination: DestinationAccount) -> 'DestinationAccountResponse':
        return cls(name=destination.name, number=destination.number, type=destination.type)


class TransactionResponse(BaseModel):
    id: str
    source_account: AccountResponse
    destination_account: DestinationAccountResponse
    amount: str = Field(..., description="Requested amount as decimal string")
    amount_display: str
    timestamp: datetime
    timestamp_display: str
    type: str
    status: str

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> 'TransactionResponse':
        return cls(
            id=transaction.id,
            source_account=AccountResponse.from_snapshot(transaction.source_account),
            destination_account=DestinationAccountResponse.from_destination(
                transaction.destination_account
            ),
            amount=str(transaction.amount),
            amount_display=format_currency(transaction.amount),
            timestamp=transaction.timestamp,
            timestamp_display=format_datetime(transaction.timestamp),
            type=transaction.type.value,
            status=transaction.status.value
        )


class NotificationResponse(BaseModel):
    id: int
    to: str
    subject: str
    body: str
    timestamp: datetime
    timestamp_display: str
    transaction_id: str
    amount: str
    amount_display: str
    source_account: AccountResponse
    destination_account: DestinationAccountResponse
    status: str
    transfer_type: str

    @classmethod
    def from_notification(cls, notification: Notification) -> 'NotificationResponse':
        return cls(
            id=notification.id,
            to=notification.to,
            subject=notification.subject,
            body=notification.body,
            timestamp=notification.timestamp,
            timestamp_display=format_datetime(notification.timestamp),
            transaction_id=notification.transaction_id,
            amount=str(notification.amount),
            amount_display=format_currency(notification.amount),
            source_account=AccountResponse.from_snapshot(notification.source_account),
            destination_account=DestinationAccountResponse.from_destination(
                notification.destination_account
            ),
            status=notification.status.value,
            transfer_type=notification.transfer_type.value
        )


class TransferRequest(BaseModel):
    """Transfer form fields as typed; all text, parsed by the engine"""
    source_id: str = ""
    dest_type: Literal["own", "external"] = "own"
    dest_id: str = ""
    external_account_number: str = ""
    amount: str = Field("", description="Amount text, e.g. \"500.00\"")


class ValidationResponse(BaseModel):
    valid: bool
    code: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_result(cls, result: ValidationResult) -> 'ValidationResponse':
        return cls(
            valid=result.is_valid,
            code=result.code.value if result.code else None,
            message=result.message
        )


class LimitsResponse(BaseModel):
    min_amount: str
    max_amount: str
    hint: str
    valid_external_accounts: List[str]
    user_email: str
