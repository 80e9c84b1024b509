import uuid
import logging
from decimal import Decimal
from typing import Optional, Tuple
from ..config import Config
from ..models.wallet import Transaction, TransactionMeta, TransactionType

logger = logging.getLogger(__name__)

class Ledger:
    """Balance mutations paired with their transaction records.

    Every method writes on the caller's connection and must run inside the
    caller's ``conn.transaction()`` block: the balance change and its record
    commit or roll back together. A debit that would take a balance below
    zero raises InsufficientFundsError, which aborts the whole bundle.
    """

    def __init__(self, repos, currency: Optional[str] = None):
        self.wallets = repos.wallets
        self.transactions = repos.transactions
        self.currency = currency or Config.CURRENCY

    @staticmethod
    def new_tx_id(prefix: str) -> str:
        return f"{prefix}_{uuid.uuid4().hex[:8].upper()}"

    def _record(self, prefix: str, user_id: str, amount: Decimal, tx_type: TransactionType,
                merchant_id: Optional[str], meta: Optional[TransactionMeta]) -> Transaction:
        return Transaction(
            tx_id=self.new_tx_id(prefix),
            user_id=user_id,
            amount=amount,
            currency=self.currency,
            type=tx_type,
            merchant_id=merchant_id,
            meta=meta or TransactionMeta()
        )

    async def debit(self, conn, user_id: str, amount: Decimal, tx_type: TransactionType,
                    prefix: str, merchant_id: Optional[str] = None,
                    meta: Optional[TransactionMeta] = None) -> Tuple[Transaction, Decimal]:
        tx = self._record(prefix, user_id, amount, tx_type, merchant_id, meta)
        balance = await self.wallets.debit(conn, user_id, amount)
        await self.transactions.insert(conn, tx)
        return tx, balance

    async def credit(self, conn, user_id: str, amount: Decimal, tx_type: TransactionType,
                     prefix: str, merchant_id: Optional[str] = None,
                     meta: Optional[TransactionMeta] = None) -> Tuple[Transaction, Decimal]:
        tx = self._record(prefix, user_id, amount, tx_type, merchant_id, meta)
        balance = await self.wallets.credit(conn, user_id, amount)
        await self.transactions.insert(conn, tx)
        return tx, balance

    async def transfer(self, conn, from_user_id: str, to_user_id: str, amount: Decimal,
                       out_type: TransactionType = TransactionType.TRANSFER_OUT,
                       out_prefix: str = "TX_OUT", in_prefix: str = "TX_IN",
                       out_meta: Optional[dict] = None,
                       in_meta: Optional[dict] = None) -> Tuple[Transaction, Transaction]:
        """Move amount between two wallets; writes one record per side,
        each pointing at the other through meta.related_tx"""
        out_id = self.new_tx_id(out_prefix)
        in_id = self.new_tx_id(in_prefix)

        out_tx = Transaction(
            tx_id=out_id,
            user_id=from_user_id,
            amount=amount,
            currency=self.currency,
            type=out_type,
            meta=TransactionMeta(to_user=to_user_id, related_tx=in_id, **(out_meta or {}))
        )
        in_tx = Transaction(
            tx_id=in_id,
            user_id=to_user_id,
            amount=amount,
            currency=self.currency,
            type=TransactionType.TRANSFER_IN,
            meta=TransactionMeta(from_user=from_user_id, related_tx=out_id, **(in_meta or {}))
        )

        await self.wallets.debit(conn, from_user_id, amount)
        await self.wallets.credit(conn, to_user_id, amount)
        await self.transactions.insert(conn, out_tx)
        await self.transactions.insert(conn, in_tx)

        logger.info(f"Transfer {out_id}/{in_id}: {amount} from {from_user_id} to {to_user_id}")
        return out_tx, in_tx
