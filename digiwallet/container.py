from datetime import timedelta
from typing import Optional
from .config import Config
from .repositories import Repositories
from .services import (
    Ledger,
    QRCodeDirectory,
    PaymentService,
    CashbackService,
    BillSplitService,
    BudgetService,
    UserService,
    SessionStore,
)

class Container:
    """Wires the services around one database and one set of repositories"""

    def __init__(self, db, repos: Optional[Repositories] = None,
                 sessions: Optional[SessionStore] = None,
                 qr_directory: Optional[QRCodeDirectory] = None,
                 cashback_today=None, clock=None):
        self.db = db
        self.repos = repos or Repositories.postgres()
        self.sessions = sessions or SessionStore(ttl=timedelta(hours=Config.SESSION_TTL_HOURS))
        self.ledger = Ledger(self.repos)

        self.cashback_service = CashbackService(db, self.repos, self.ledger, today=cashback_today)
        self.payment_service = PaymentService(
            db, self.repos, self.ledger,
            cashback_service=self.cashback_service,
            qr_directory=qr_directory,
            clock=clock
        )
        self.bill_split_service = BillSplitService(db, self.repos, self.ledger)
        self.budget_service = BudgetService(db, self.repos, clock=clock)
        self.user_service = UserService(db, self.repos)
