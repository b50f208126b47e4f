"""
Currency Support Module

Philippine peso amounts with proper Decimal precision for financial
calculations. NEVER uses float for monetary values.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN, ROUND_HALF_UP, getcontext
import re

# Set global decimal context for financial precision
getcontext().prec = 28  # High precision for financial calculations

CURRENCY_SYMBOL = "P"  # Display prefix used instead of the ISO code
CURRENCY_PRECISION = 2

# Plain decimal literal with ASCII digits only: optional sign, digits with
# optional fraction, optional exponent. Control characters and spaces around
# it are ignored.
_DECIMAL_LITERAL = re.compile(
    r'[\x00-\x20]*([+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?)[\x00-\x20]*'
)


def parse_amount(value: str) -> Decimal:
    """
    Parse user-entered amount text into a Decimal

    Only plain decimal literals in ASCII digits are accepted; surrounding
    spaces and control characters are ignored. Inner whitespace, thousands
    separators, currency symbols and non-finite values are rejected.

    Args:
        value: Amount text as typed by the user

    Returns:
        Decimal value

    Raises:
        ValueError: If the text is not a numeric amount
    """
    match = _DECIMAL_LITERAL.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    try:
        return Decimal(match.group(1))
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal")


def try_parse_amount(value: str):
    """Parse amount text, returning None instead of raising"""
    try:
        return parse_amount(value)
    except ValueError:
        return None


def to_amount(value) -> Decimal:
    """Coerce an int, str or Decimal into a Decimal amount"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # Go through str() so 0.1 stays 0.1
        return Decimal(str(value))
    return Decimal(value)


def round_amount(value: Decimal, rounding: str = ROUND_HALF_UP) -> Decimal:
    """Round decimal to peso precision (centavos)"""
    return value.quantize(
        Decimal('0.1') ** CURRENCY_PRECISION,
        rounding=rounding
    )


def round_for_display(value: Decimal) -> Decimal:
    """Round to centavos the way the display formatter does (banker's rounding)"""
    return round_amount(value, rounding=ROUND_HALF_EVEN)
