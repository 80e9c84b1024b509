class WalletError(Exception):
    """Base class for ledger conditions raised inside an atomic bundle"""

class WalletNotFoundError(WalletError):
    def __init__(self, user_id: str):
        super().__init__(f"Wallet not found for user {user_id}")
        self.user_id = user_id

class InsufficientFundsError(WalletError):
    def __init__(self, user_id: str, amount):
        super().__init__(f"Insufficient funds in wallet of {user_id} for {amount}")
        self.user_id = user_id
        self.amount = amount

class SplitStateError(WalletError):
    """Bill split is no longer pending"""
    def __init__(self, split_id: int):
        super().__init__(f"Bill split {split_id} is not pending")
        self.split_id = split_id
