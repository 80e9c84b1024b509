from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from ..models.bill_split import BillSplit, SplitStatus

DETAIL_COLUMNS = """
    bs.*,
    u_payer.name AS payer_name,
    u_debtor.name AS debtor_name,
    t.merchant_id,
    m.name AS merchant_name
"""

DETAIL_JOINS = """
    LEFT JOIN users u_payer ON u_payer.user_id = bs.payer_user_id
    LEFT JOIN users u_debtor ON u_debtor.user_id = bs.debtor_user_id
    LEFT JOIN transactions t ON t.tx_id = bs.tx_id
    LEFT JOIN merchants m ON m.merchant_id = t.merchant_id
"""

class BillSplitRepository:
    async def create_many(self, conn, splits: List[BillSplit]) -> List[BillSplit]:
        """Insert all splits; call inside a transaction"""
        created = []
        for split in splits:
            split_id = await conn.fetchval("""
                INSERT INTO bill_splits (
                    tx_id, payer_user_id, debtor_user_id, total_amount,
                    share_amount, weight, status, created_at
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
                RETURNING split_id
            """,
                split.tx_id,
                split.payer_user_id,
                split.debtor_user_id,
                split.total_amount,
                split.share_amount,
                split.weight,
                split.status.value,
                split.created_at
            )
            created.append(split.model_copy(update={'split_id': split_id}))
        return created

    async def get(self, conn, split_id: int) -> Optional[BillSplit]:
        row = await conn.fetchrow("""
            SELECT * FROM bill_splits WHERE split_id = $1
        """, split_id)
        return BillSplit.model_validate(dict(row)) if row else None

    async def get_detailed(self, conn, split_id: int) -> Optional[Dict[str, Any]]:
        row = await conn.fetchrow(f"""
            SELECT {DETAIL_COLUMNS}
            FROM bill_splits bs
            {DETAIL_JOINS}
            WHERE bs.split_id = $1
        """, split_id)
        return dict(row) if row else None

    async def mark_settled(self, conn, split_id: int, settled_at: datetime) -> bool:
        """pending -> settled; False when the split was not pending"""
        result = await conn.execute("""
            UPDATE bill_splits
            SET status = $2, settled_at = $3
            WHERE split_id = $1 AND status = $4
        """, split_id, SplitStatus.SETTLED.value, settled_at, SplitStatus.PENDING.value)
        return result == "UPDATE 1"

    async def mark_cancelled(self, conn, split_id: int) -> bool:
        """pending -> cancelled; False when the split was not pending"""
        result = await conn.execute("""
            UPDATE bill_splits
            SET status = $2
            WHERE split_id = $1 AND status = $3
        """, split_id, SplitStatus.CANCELLED.value, SplitStatus.PENDING.value)
        return result == "UPDATE 1"

    async def find_for_user(self, conn, user_id: str, role: str = "both",
                            status: Optional[str] = None) -> List[Dict[str, Any]]:
        """Splits where the user is payer, debtor or either, newest first"""
        if role == "payer":
            party = "bs.payer_user_id = $1"
        elif role == "debtor":
            party = "bs.debtor_user_id = $1"
        else:
            party = "(bs.payer_user_id = $1 OR bs.debtor_user_id = $1)"

        rows = await conn.fetch(f"""
            SELECT {DETAIL_COLUMNS}
            FROM bill_splits bs
            {DETAIL_JOINS}
            WHERE {party}
            AND ($2::text IS NULL OR bs.status = $2)
            ORDER BY bs.created_at DESC, bs.split_id DESC
        """, user_id, status)
        return [dict(r) for r in rows]

    async def pending_summary(self, conn, user_id: str) -> Dict[str, Dict[str, Any]]:
        owed_to_me = await conn.fetchrow("""
            SELECT COUNT(*) AS count, COALESCE(SUM(share_amount), 0) AS total_amount
            FROM bill_splits
            WHERE payer_user_id = $1 AND status = $2
        """, user_id, SplitStatus.PENDING.value)
        i_owe = await conn.fetchrow("""
            SELECT COUNT(*) AS count, COALESCE(SUM(share_amount), 0) AS total_amount
            FROM bill_splits
            WHERE debtor_user_id = $1 AND status = $2
        """, user_id, SplitStatus.PENDING.value)
        return {
            "owed_to_me": {
                "count": owed_to_me['count'],
                "total_amount": Decimal(owed_to_me['total_amount'])
            },
            "i_owe": {
                "count": i_owe['count'],
                "total_amount": Decimal(i_owe['total_amount'])
            }
        }
