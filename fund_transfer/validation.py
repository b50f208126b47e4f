"""
Transfer Validation Module

Checks raw transfer form input before any money moves. Rules run in a fixed
order and the first failing rule decides the outcome. Validation never
mutates state and never raises for bad user input.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Iterable, Optional, Union
from enum import Enum

from .accounts import AccountRegistry
from .currency import CURRENCY_SYMBOL, try_parse_amount
from .transactions import TransferType


class ValidationErrorCode(Enum):
    """Reasons a transfer request can be rejected"""
    SOURCE_REQUIRED = "source_required"
    DESTINATION_REQUIRED = "destination_required"
    EXTERNAL_ACCOUNT_REQUIRED = "external_account_required"
    SAME_ACCOUNT = "same_account"
    INVALID_DESTINATION = "invalid_destination"
    INVALID_AMOUNT = "invalid_amount"
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    BELOW_MINIMUM = "below_minimum"
    ABOVE_MAXIMUM = "above_maximum"
    INSUFFICIENT_BALANCE = "insufficient_balance"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a transfer request"""
    code: Optional[ValidationErrorCode] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> 'ValidationResult':
        return cls()

    @classmethod
    def failed(cls, code: ValidationErrorCode, message: str) -> 'ValidationResult':
        return cls(code=code, message=message)

    @property
    def is_valid(self) -> bool:
        return self.code is None

    def __bool__(self) -> bool:
        return self.is_valid


class TransferValidationError(ValueError):
    """Raised when a transfer is submitted with input that fails validation"""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(result.message)

    @property
    def code(self) -> ValidationErrorCode:
        return self.result.code


class TransferValidator:
    """
    Validates transfer requests against account balances and limits
    """

    def __init__(
        self,
        accounts: AccountRegistry,
        min_amount: Decimal,
        max_amount: Decimal,
        valid_external_accounts: Iterable[str]
    ):
        self.accounts = accounts
        self.min_amount = min_amount
        self.max_amount = max_amount
        self.valid_external_accounts = frozenset(valid_external_accounts)

    @property
    def minimum_message(self) -> str:
        # Minimum prints like a double (100.0), maximum as a whole number
        return f"Minimum transfer amount is {CURRENCY_SYMBOL}{float(self.min_amount)}"

    @property
    def maximum_message(self) -> str:
        return f"Maximum transfer amount is {CURRENCY_SYMBOL}{int(self.max_amount)}"

    def validate(
        self,
        source_id: str,
        dest_type: Union[str, TransferType],
        dest_id: str,
        external_account_number: str,
        amount_text: str
    ) -> ValidationResult:
        """
        Validate a transfer request

        Args:
            source_id: Id of the account to debit
            dest_type: "own" or "external"
            dest_id: Id of the destination account (own transfers)
            external_account_number: Destination number (external transfers)
            amount_text: Amount exactly as typed

        Returns:
            ValidationResult, ok or carrying the first failing rule

        Raises:
            ValueError: If dest_type is not a known transfer type
        """
        transfer_type = TransferType.parse(dest_type)
        is_own = transfer_type == TransferType.OWN
        is_external = transfer_type == TransferType.EXTERNAL

        if not source_id:
            return ValidationResult.failed(
                ValidationErrorCode.SOURCE_REQUIRED,
                "Please select a source account"
            )

        if is_own and not dest_id:
            return ValidationResult.failed(
                ValidationErrorCode.DESTINATION_REQUIRED,
                "Please select a destination account"
            )

        if is_external and not external_account_number:
            return ValidationResult.failed(
                ValidationErrorCode.EXTERNAL_ACCOUNT_REQUIRED,
                "Please enter external account number"
            )

        if is_own and source_id == dest_id:
            return ValidationResult.failed(
                ValidationErrorCode.SAME_ACCOUNT,
                "Source and destination accounts must be different"
            )

        if is_external and external_account_number not in self.valid_external_accounts:
            return ValidationResult.failed(
                ValidationErrorCode.INVALID_DESTINATION,
                "Invalid destination account number"
            )

        amount = try_parse_amount(amount_text)
        if amount is None:
            return ValidationResult.failed(
                ValidationErrorCode.INVALID_AMOUNT,
                "Please enter a valid numeric amount"
            )
        if amount <= 0:
            return ValidationResult.failed(
                ValidationErrorCode.NON_POSITIVE_AMOUNT,
                f"Amount must be greater than {CURRENCY_SYMBOL}0"
            )
        if amount < self.min_amount:
            return ValidationResult.failed(
                ValidationErrorCode.BELOW_MINIMUM, self.minimum_message
            )
        if amount > self.max_amount:
            return ValidationResult.failed(
                ValidationErrorCode.ABOVE_MAXIMUM, self.maximum_message
            )

        # Checked against the requested amount, not the amount actually deducted
        source = self.accounts.find(source_id)
        if source is not None and source.balance < amount:
            return ValidationResult.failed(
                ValidationErrorCode.INSUFFICIENT_BALANCE,
                "Insufficient balance in source account"
            )

        return ValidationResult.ok()
