from .ledger import Ledger
from .qr_directory import QRCodeDirectory
from .payment_service import PaymentService
from .cashback_service import CashbackService
from .bill_split_service import BillSplitService
from .budget_service import BudgetService
from .user_service import UserService
from .session_store import SessionStore

__all__ = [
    'Ledger',
    'QRCodeDirectory',
    'PaymentService',
    'CashbackService',
    'BillSplitService',
    'BudgetService',
    'UserService',
    'SessionStore',
]
