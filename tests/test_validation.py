"""
Test suite for transfer validation

Tests each rule, the order rules are applied in, and that validation is
pure and repeatable.
"""

import pytest
from decimal import Decimal

from fund_transfer.accounts import AccountRegistry
from fund_transfer.config import TransferConfig
from fund_transfer.engine import LedgerEngine
from fund_transfer.transactions import TransferType
from fund_transfer.validation import (
    TransferValidationError, TransferValidator, ValidationErrorCode, ValidationResult
)


@pytest.fixture
def validator():
    return TransferValidator(
        AccountRegistry(),
        min_amount=Decimal("100"),
        max_amount=Decimal("50000"),
        valid_external_accounts=["1234567890", "9876543210", "5678901234", "7777888899"]
    )


class TestValidationResult:
    """Test the tagged result"""

    def test_ok(self):
        result = ValidationResult.ok()
        assert result.is_valid
        assert bool(result)
        assert result.code is None
        assert result.message is None

    def test_failed(self):
        result = ValidationResult.failed(ValidationErrorCode.SAME_ACCOUNT, "nope")
        assert not result.is_valid
        assert not bool(result)
        assert result.code == ValidationErrorCode.SAME_ACCOUNT
        assert result.message == "nope"

    def test_error_carries_result(self):
        result = ValidationResult.failed(ValidationErrorCode.INVALID_AMOUNT, "bad amount")
        error = TransferValidationError(result)

        assert isinstance(error, ValueError)
        assert str(error) == "bad amount"
        assert error.code == ValidationErrorCode.INVALID_AMOUNT


class TestTransferValidator:
    """Test the validation rules and their messages"""

    def test_valid_own_transfer(self, validator):
        assert validator.validate("A", "own", "B", "", "500").is_valid

    def test_valid_external_transfer(self, validator):
        assert validator.validate("A", "external", "", "1234567890", "500").is_valid

    def test_accepts_transfer_type_enum(self, validator):
        assert validator.validate("A", TransferType.OWN, "B", "", "500").is_valid

    @pytest.mark.parametrize("args, code, message", [
        (("", "own", "B", "", "500"),
         ValidationErrorCode.SOURCE_REQUIRED, "Please select a source account"),
        (("A", "own", "", "", "500"),
         ValidationErrorCode.DESTINATION_REQUIRED, "Please select a destination account"),
        (("A", "external", "", "", "500"),
         ValidationErrorCode.EXTERNAL_ACCOUNT_REQUIRED, "Please enter external account number"),
        (("A", "own", "A", "", "100"),
         ValidationErrorCode.SAME_ACCOUNT, "Source and destination accounts must be different"),
        (("A", "external", "", "9999999999", "200"),
         ValidationErrorCode.INVALID_DESTINATION, "Invalid destination account number"),
        (("A", "own", "B", "", "abc"),
         ValidationErrorCode.INVALID_AMOUNT, "Please enter a valid numeric amount"),
        (("A", "own", "B", "", ""),
         ValidationErrorCode.INVALID_AMOUNT, "Please enter a valid numeric amount"),
        (("A", "own", "B", "", "0"),
         ValidationErrorCode.NON_POSITIVE_AMOUNT, "Amount must be greater than P0"),
        (("A", "own", "B", "", "-5"),
         ValidationErrorCode.NON_POSITIVE_AMOUNT, "Amount must be greater than P0"),
        (("A", "own", "B", "", "50"),
         ValidationErrorCode.BELOW_MINIMUM, "Minimum transfer amount is P100.0"),
        (("A", "own", "B", "", "50000.01"),
         ValidationErrorCode.ABOVE_MAXIMUM, "Maximum transfer amount is P50000"),
        (("C", "own", "A", "", "3000"),
         ValidationErrorCode.INSUFFICIENT_BALANCE, "Insufficient balance in source account"),
    ])
    def test_rule_messages(self, validator, args, code, message):
        result = validator.validate(*args)
        assert result.code == code
        assert result.message == message

    def test_boundaries_inclusive(self, validator):
        """Test min and max amounts are themselves allowed"""
        assert validator.validate("A", "own", "B", "", "100").is_valid
        assert validator.validate("A", "own", "B", "", "10000").is_valid
        assert validator.validate("B", "own", "C", "", "5000").is_valid

    def test_max_checked_before_balance(self, validator):
        result = validator.validate("C", "own", "A", "", "60000")
        assert result.code == ValidationErrorCode.ABOVE_MAXIMUM

    def test_first_failing_rule_wins(self, validator):
        """Test short-circuit ordering when several rules fail"""
        # Missing source beats everything else
        result = validator.validate("", "own", "", "", "abc")
        assert result.code == ValidationErrorCode.SOURCE_REQUIRED

        # Same account beats a bad amount
        result = validator.validate("A", "own", "A", "", "abc")
        assert result.code == ValidationErrorCode.SAME_ACCOUNT

        # Unknown external account beats a below-minimum amount
        result = validator.validate("A", "external", "", "0000000000", "50")
        assert result.code == ValidationErrorCode.INVALID_DESTINATION

    def test_minimum_regardless_of_other_fields(self, validator):
        assert validator.validate("A", "own", "B", "", "50").code == ValidationErrorCode.BELOW_MINIMUM
        assert validator.validate(
            "A", "external", "", "9876543210", "50"
        ).code == ValidationErrorCode.BELOW_MINIMUM

    def test_own_fields_ignored_for_external(self, validator):
        """Test dest_id plays no part in an external transfer"""
        assert validator.validate("A", "external", "A", "5678901234", "500").is_valid

    def test_amount_padding_and_digits(self, validator):
        """Test padded ASCII amounts pass and non-ASCII digits do not"""
        assert validator.validate("A", "own", "B", "", " 500 ").is_valid
        assert validator.validate("A", "own", "B", "", "\u0665\u0660\u0660").code == \
            ValidationErrorCode.INVALID_AMOUNT

    def test_unknown_source_skips_balance_check(self, validator):
        assert validator.validate("Z", "external", "", "1234567890", "500").is_valid

    def test_unknown_transfer_type(self, validator):
        with pytest.raises(ValueError):
            validator.validate("A", "wire", "B", "", "500")

    def test_limits_from_config(self):
        validator = TransferValidator(
            AccountRegistry(),
            min_amount=Decimal("150.5"),
            max_amount=Decimal("2500.75"),
            valid_external_accounts=[]
        )
        assert validator.validate("A", "own", "B", "", "150").message == \
            "Minimum transfer amount is P150.5"
        assert validator.validate("A", "own", "B", "", "2600").message == \
            "Maximum transfer amount is P2500"
        assert validator.validate("A", "external", "", "1234567890", "500").code == \
            ValidationErrorCode.INVALID_DESTINATION


class TestEngineValidation:
    """Test validation through the engine"""

    def setup_method(self):
        self.engine = LedgerEngine(config=TransferConfig())

    def _state(self):
        return (self.engine.accounts, self.engine.transactions, self.engine.notifications)

    @pytest.mark.parametrize("args", [
        ("A", "own", "B", "", "500"),
        ("A", "external", "", "9999999999", "200"),
        ("A", "own", "A", "", "100"),
        ("C", "own", "A", "", "3000"),
        ("A", "own", "B", "", "50"),
    ])
    def test_validation_is_pure(self, args):
        before = self._state()
        self.engine.validate_transfer(*args)
        assert self._state() == before

    def test_validation_is_repeatable(self):
        first = self.engine.validate_transfer("C", "own", "A", "", "3000")
        second = self.engine.validate_transfer("C", "own", "A", "", "3000")
        assert first == second

        first = self.engine.validate_transfer("A", "own", "B", "", "500")
        second = self.engine.validate_transfer("A", "own", "B", "", "500")
        assert first == second == ValidationResult.ok()

    def test_scenario_external_not_whitelisted(self):
        result = self.engine.validate_transfer("A", "external", "", "9999999999", "200")
        assert result.code == ValidationErrorCode.INVALID_DESTINATION
        assert self.engine.get_account("A").balance == Decimal("10000")

    def test_scenario_same_account(self):
        result = self.engine.validate_transfer("A", "own", "A", "", "100")
        assert result.code == ValidationErrorCode.SAME_ACCOUNT

    def test_scenario_insufficient_balance(self):
        result = self.engine.validate_transfer("C", "own", "A", "", "3000")
        assert result.code == ValidationErrorCode.INSUFFICIENT_BALANCE
