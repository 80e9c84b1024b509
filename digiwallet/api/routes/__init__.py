from . import auth, budgets, cashback, payments, splits

__all__ = ['auth', 'budgets', 'cashback', 'payments', 'splits']
