import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional
from ..exceptions import InsufficientFundsError, SplitStateError
from ..models.bill_split import BillSplit, SplitStatus
from ..models.wallet import TransactionType
from ..utils.money import round_money
from .ledger import Ledger

def equal_share(total: Decimal, debtor_count: int) -> Decimal:
    """Per-debtor share; the payer counts as a participant but is not billed"""
    return round_money(Decimal(total) / (debtor_count + 1))

def weighted_shares(total: Decimal, weights: Iterable[Decimal]) -> List[Decimal]:
    """Shares proportional to weights, each rounded on its own.

    The rounded shares are not reconciled with the total, so their sum may
    be off by up to one cent per debtor.
    """
    weights = list(weights)
    total_weight = sum(weights)
    return [round_money(Decimal(total) * w / total_weight) for w in weights]

# bill_splits.weight is NUMERIC(10,4)
MAX_WEIGHT = Decimal("1e6")

def _parse_weight(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        weight = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not weight.is_finite() or weight <= 0 or weight >= MAX_WEIGHT:
        return None
    return weight

class BillSplitService:
    """Splits a completed payment into debts owed to the payer"""

    def __init__(self, db, repos, ledger: Optional[Ledger] = None):
        self.db = db
        self.repos = repos
        self.ledger = ledger or Ledger(repos)
        self.logger = logging.getLogger(__name__)

    async def _load_owned_transaction(self, conn, payer_user_id: str, original_tx_id: str):
        tx = await self.repos.transactions.get(conn, original_tx_id)
        if not tx:
            return None, {"success": False, "message": "Original transaction not found"}
        if tx.user_id != payer_user_id:
            return None, {"success": False, "message": "This transaction does not belong to you"}
        return tx, None

    async def _all_users_exist(self, conn, user_ids: List[str]) -> bool:
        for user_id in user_ids:
            if not await self.repos.users.exists(conn, user_id):
                return False
        return True

    async def create_equal_split(self, payer_user_id: str, original_tx_id: str,
                                 debtor_user_ids: List[str]) -> Dict[str, Any]:
        """Bill every debtor round(total / (debtors + 1), 2)"""
        if not payer_user_id or not original_tx_id or not isinstance(debtor_user_ids, list) \
                or not debtor_user_ids:
            return {"success": False, "message": "Invalid parameters"}

        debtors = []
        for user_id in debtor_user_ids:
            if not isinstance(user_id, str) or not user_id:
                return {"success": False, "message": "Invalid parameters"}
            if user_id != payer_user_id and user_id not in debtors:
                debtors.append(user_id)

        if not debtors:
            return {"success": False, "message": "Name at least one debtor"}

        async with self.db.pool.acquire() as conn:
            tx, failure = await self._load_owned_transaction(conn, payer_user_id, original_tx_id)
            if failure:
                return failure

            if not await self._all_users_exist(conn, debtors):
                return {"success": False, "message": "One or more users were not found"}

            share = equal_share(tx.amount, len(debtors))
            if share <= 0:
                return {"success": False, "message": "Amount is too small to split"}

            splits = [
                BillSplit(
                    tx_id=original_tx_id,
                    payer_user_id=payer_user_id,
                    debtor_user_id=debtor,
                    total_amount=tx.amount,
                    share_amount=share,
                    weight=Decimal(1)
                )
                for debtor in debtors
            ]
            async with conn.transaction():
                splits = await self.repos.bill_splits.create_many(conn, splits)

        self.logger.info(f"Equal split of {original_tx_id} by {payer_user_id} across {len(debtors)} debtors")
        return {
            "success": True,
            "message": "Bill split created",
            "data": {
                "original_tx_id": original_tx_id,
                "total_amount": tx.amount,
                "share_amount": share,
                "total_users": len(debtors) + 1,
                "debtor_count": len(debtors),
                "splits": [self._split_summary(s) for s in splits]
            }
        }

    async def create_weighted_split(self, payer_user_id: str, original_tx_id: str,
                                    debtor_weights: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Bill each debtor round(total * weight / sum(weights), 2)"""
        if not payer_user_id or not original_tx_id or not isinstance(debtor_weights, list) \
                or not debtor_weights:
            return {"success": False, "message": "Invalid parameters"}

        entries = []
        for item in debtor_weights:
            if not isinstance(item, dict) or not isinstance(item.get("user_id"), str) \
                    or not item["user_id"]:
                return {"success": False, "message": "Invalid parameters"}
            if item["user_id"] != payer_user_id:
                entries.append(item)

        if not entries:
            return {"success": False, "message": "Name at least one debtor"}

        debtors = [item["user_id"] for item in entries]
        if len(set(debtors)) != len(debtors):
            return {"success": False, "message": "Each debtor may appear only once"}

        weights = [_parse_weight(item.get("weight")) for item in entries]
        if any(w is None for w in weights):
            return {"success": False, "message": "All weights must be positive numbers"}

        async with self.db.pool.acquire() as conn:
            tx, failure = await self._load_owned_transaction(conn, payer_user_id, original_tx_id)
            if failure:
                return failure

            if not await self._all_users_exist(conn, debtors):
                return {"success": False, "message": "One or more users were not found"}

            shares = weighted_shares(tx.amount, weights)
            if any(s <= 0 for s in shares):
                return {"success": False, "message": "Amount is too small to split"}

            splits = [
                BillSplit(
                    tx_id=original_tx_id,
                    payer_user_id=payer_user_id,
                    debtor_user_id=debtor,
                    total_amount=tx.amount,
                    share_amount=share,
                    weight=weight
                )
                for debtor, weight, share in zip(debtors, weights, shares)
            ]
            async with conn.transaction():
                splits = await self.repos.bill_splits.create_many(conn, splits)

        self.logger.info(f"Weighted split of {original_tx_id} by {payer_user_id} across {len(debtors)} debtors")
        return {
            "success": True,
            "message": "Bill split by weight created",
            "data": {
                "original_tx_id": original_tx_id,
                "total_amount": tx.amount,
                "total_weight": sum(weights),
                "debtor_count": len(debtors),
                "splits": [self._split_summary(s) for s in splits]
            }
        }

    async def settle_bill_split(self, split_id: int, paying_user_id: str) -> Dict[str, Any]:
        """Debtor pays their share back to the payer.

        The transfer and the pending -> settled update share one bundle; a
        split that stopped being pending meanwhile rolls the transfer back.
        """
        async with self.db.pool.acquire() as conn:
            split = await self.repos.bill_splits.get(conn, split_id)
            if not split:
                return {"success": False, "message": "Bill split not found"}

            if split.debtor_user_id != paying_user_id:
                return {"success": False, "message": "Only the debtor can settle this split"}

            if split.status == SplitStatus.SETTLED:
                return {"success": False, "message": "This bill split is already settled"}

            if split.status == SplitStatus.CANCELLED:
                return {"success": False, "message": "This bill split was cancelled"}

            wallet = await self.repos.wallets.get(conn, paying_user_id)
            if not wallet or not wallet.has_sufficient_funds(split.share_amount):
                return {"success": False, "message": "Insufficient balance"}

            try:
                async with conn.transaction():
                    out_tx, in_tx = await self.ledger.transfer(
                        conn, split.debtor_user_id, split.payer_user_id, split.share_amount,
                        out_type=TransactionType.BILL_SPLIT,
                        out_prefix="TX_SPLIT", in_prefix="TX_SPLIT",
                        out_meta={"split_id": split_id, "kind": "split_payment"},
                        in_meta={"split_id": split_id, "kind": "split_received"}
                    )
                    if not await self.repos.bill_splits.mark_settled(
                            conn, split_id, datetime.now(timezone.utc)):
                        raise SplitStateError(split_id)
            except InsufficientFundsError:
                return {"success": False, "message": "Insufficient balance"}
            except SplitStateError:
                return {"success": False, "message": "This bill split is no longer pending"}

        self.logger.info(f"Split {split_id} settled: {split.share_amount} from "
                         f"{split.debtor_user_id} to {split.payer_user_id}")
        return {
            "success": True,
            "message": "Bill split settled",
            "data": {
                "split_id": split_id,
                "amount": split.share_amount,
                "payer_user_id": split.payer_user_id,
                "debtor_user_id": split.debtor_user_id,
                "transfer_transaction_id": out_tx.tx_id,
                "received_transaction_id": in_tx.tx_id
            }
        }

    async def cancel_bill_split(self, split_id: int, user_id: str) -> Dict[str, Any]:
        """Payer withdraws a pending split; no money moves"""
        async with self.db.pool.acquire() as conn:
            split = await self.repos.bill_splits.get(conn, split_id)
            if not split:
                return {"success": False, "message": "Bill split not found"}

            if split.payer_user_id != user_id:
                return {"success": False, "message": "Only the payer can cancel this split"}

            if split.status == SplitStatus.SETTLED:
                return {"success": False, "message": "A settled bill split cannot be cancelled"}

            if split.status == SplitStatus.CANCELLED:
                return {"success": False, "message": "This bill split is already cancelled"}

            if not await self.repos.bill_splits.mark_cancelled(conn, split_id):
                return {"success": False, "message": "This bill split is no longer pending"}

        self.logger.info(f"Split {split_id} cancelled by {user_id}")
        return {"success": True, "message": "Bill split cancelled"}

    async def get_user_split_summary(self, user_id: str) -> Dict[str, Any]:
        async with self.db.pool.acquire() as conn:
            summary = await self.repos.bill_splits.pending_summary(conn, user_id)
            recent = await self.repos.bill_splits.find_for_user(conn, user_id)

        return {
            "success": True,
            "data": {
                "summary": summary,
                "pending_as_payer_count": summary["owed_to_me"]["count"],
                "pending_as_debtor_count": summary["i_owe"]["count"],
                "recent_splits": recent[:10]
            }
        }

    async def get_split_details(self, split_id: int) -> Dict[str, Any]:
        async with self.db.pool.acquire() as conn:
            details = await self.repos.bill_splits.get_detailed(conn, split_id)

        if not details:
            return {"success": False, "message": "Bill split not found"}
        return {"success": True, "data": details}

    async def get_user_splits(self, user_id: str, status: Optional[str] = None,
                              role: Optional[str] = None) -> Dict[str, Any]:
        role = role or "both"
        if role not in ("payer", "debtor", "both"):
            return {"success": False, "message": "Role must be payer, debtor or both"}
        if status is not None and status not in {s.value for s in SplitStatus}:
            return {"success": False, "message": "Invalid status"}

        async with self.db.pool.acquire() as conn:
            splits = await self.repos.bill_splits.find_for_user(conn, user_id, role, status)

        return {"success": True, "data": {"splits": splits, "count": len(splits)}}

    @staticmethod
    def _split_summary(split: BillSplit) -> Dict[str, Any]:
        return {
            "split_id": split.split_id,
            "debtor_user_id": split.debtor_user_id,
            "share_amount": split.share_amount,
            "weight": split.weight
        }
