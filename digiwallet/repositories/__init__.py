from dataclasses import dataclass
from .user_repository import UserRepository, MerchantRepository
from .wallet_repository import WalletRepository
from .transaction_repository import TransactionRepository
from .bill_split_repository import BillSplitRepository
from .cashback_repository import CashbackRuleRepository
from .budget_repository import BudgetRepository

@dataclass
class Repositories:
    """Data access objects shared by the services"""
    users: UserRepository
    merchants: MerchantRepository
    wallets: WalletRepository
    transactions: TransactionRepository
    bill_splits: BillSplitRepository
    cashback_rules: CashbackRuleRepository
    budgets: BudgetRepository

    @classmethod
    def postgres(cls) -> "Repositories":
        return cls(
            users=UserRepository(),
            merchants=MerchantRepository(),
            wallets=WalletRepository(),
            transactions=TransactionRepository(),
            bill_splits=BillSplitRepository(),
            cashback_rules=CashbackRuleRepository(),
            budgets=BudgetRepository(),
        )

__all__ = [
    'Repositories',
    'UserRepository',
    'MerchantRepository',
    'WalletRepository',
    'TransactionRepository',
    'BillSplitRepository',
    'CashbackRuleRepository',
    'BudgetRepository',
]
