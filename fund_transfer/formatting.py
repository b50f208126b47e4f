"""
Display formatting helpers

Currency and timestamp rendering matching what the banking demo shows.
"""

from datetime import datetime
from decimal import Decimal

from .accounts import AccountSnapshot, DestinationAccount, EXTERNAL_ACCOUNT_TYPE
from .currency import CURRENCY_SYMBOL, round_for_display, to_amount

DATETIME_FORMAT = "%b %d, %Y %H:%M:%S"


def format_currency(amount) -> str:
    """Format a peso amount, e.g. ``P10,000.00`` or ``-P150.50``"""
    value = round_for_display(to_amount(amount))
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(value):,.2f}"


def format_datetime(moment: datetime) -> str:
    """Format a timestamp, e.g. ``Oct 19, 2026 14:03:09``"""
    return moment.strftime(DATETIME_FORMAT)


def format_account_number(number: str) -> str:
    return f"Acc# {number}"


def destination_label(destination: DestinationAccount) -> str:
    """Name shown for a transfer destination"""
    if destination.is_external:
        return EXTERNAL_ACCOUNT_TYPE
    return destination.name


def account_summary(account: AccountSnapshot) -> str:
    """Source-account picker line: name, type and balance"""
    return f"{account.name} ({account.type}) - {format_currency(account.balance)}"


def limits_hint(min_amount: Decimal, max_amount: Decimal) -> str:
    """Hint shown under the amount field"""
    return f"Min: {CURRENCY_SYMBOL}{int(min_amount)} | Max: {CURRENCY_SYMBOL}{int(max_amount)}"
