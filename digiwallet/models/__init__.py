from .base import TimeStampedModel
from .user import User, Merchant
from .wallet import (
    Wallet,
    Transaction,
    TransactionMeta,
    TransactionType,
    TransactionStatus,
)
from .bill_split import BillSplit, SplitStatus
from .cashback import CashbackRule, CashbackRuleType
from .budget import Budget, BUDGET_CATEGORIES
from .qr import QRPayload

__all__ = [
    'TimeStampedModel',
    'User',
    'Merchant',
    'Wallet',
    'Transaction',
    'TransactionMeta',
    'TransactionType',
    'TransactionStatus',
    'BillSplit',
    'SplitStatus',
    'CashbackRule',
    'CashbackRuleType',
    'Budget',
    'BUDGET_CATEGORIES',
    'QRPayload',
]
