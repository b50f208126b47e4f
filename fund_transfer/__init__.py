"""
Fund Transfer Simulator

An in-memory ledger engine backing a mobile banking demo: account balances,
transfer validation, transaction ids and email-style confirmations.
All monetary values use Decimal precision.
"""

__version__ = "1.0.0"
