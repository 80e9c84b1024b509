# digiwallet/handlers/__init__.py
from .base_handler import BaseHandler
from .wallet_handler import WalletHandler
from .split_handler import SplitHandler
from .budget_handler import BudgetHandler
from .callback_handler import CallbackHandler

__all__ = [
    'BaseHandler',
    'WalletHandler',
    'SplitHandler',
    'BudgetHandler',
    'CallbackHandler',
]
