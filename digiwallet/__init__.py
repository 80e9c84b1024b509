"""Digital wallet ledger: payments, cashback, bill splits and budgets"""

__version__ = "0.1.0"
