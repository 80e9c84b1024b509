from decimal import Decimal
from typing import List, Optional, Tuple
from ..models.wallet import Transaction, TransactionStatus, TransactionType

class TransactionRepository:
    """Append-only access to the transactions table"""

    async def insert(self, conn, tx: Transaction):
        await conn.execute("""
            INSERT INTO transactions (
                tx_id, created_at, user_id, merchant_id,
                amount, currency, type, status, meta
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
        """,
            tx.tx_id,
            tx.created_at,
            tx.user_id,
            tx.merchant_id,
            tx.amount,
            tx.currency,
            tx.type.value,
            tx.status.value,
            tx.meta.to_json()
        )

    async def get(self, conn, tx_id: str) -> Optional[Transaction]:
        row = await conn.fetchrow("""
            SELECT * FROM transactions WHERE tx_id = $1
        """, tx_id)
        return Transaction.model_validate(dict(row)) if row else None

    async def history(self, conn, user_id: str, page: int,
                      page_size: int) -> Tuple[List[Tuple[Transaction, Optional[str]]], int]:
        """One page of a user's transactions, newest first, with merchant names"""
        total = await conn.fetchval("""
            SELECT COUNT(*) FROM transactions WHERE user_id = $1
        """, user_id)
        rows = await conn.fetch("""
            SELECT t.*, m.name AS merchant_name
            FROM transactions t
            LEFT JOIN merchants m ON m.merchant_id = t.merchant_id
            WHERE t.user_id = $1
            ORDER BY t.created_at DESC
            LIMIT $2 OFFSET $3
        """, user_id, page_size, (page - 1) * page_size)
        items = []
        for row in rows:
            data = dict(row)
            merchant_name = data.pop('merchant_name')
            items.append((Transaction.model_validate(data), merchant_name))
        return items, total

    async def has_cashback_for_rule(self, conn, user_id: str, rule_id: str) -> bool:
        return bool(await conn.fetchval("""
            SELECT EXISTS (
                SELECT 1 FROM transactions
                WHERE user_id = $1
                AND type = $2
                AND meta ->> 'rule_id' = $3
            )
        """, user_id, TransactionType.CASHBACK.value, rule_id))

    async def spending(self, conn, user_id: str, month: str,
                       category: Optional[str] = None, tz: str = "UTC") -> Decimal:
        """Sum of ok payments in a YYYY-MM month, optionally for one merchant category.

        Month boundaries are taken in the ``tz`` time zone.
        """
        total = await conn.fetchval("""
            SELECT COALESCE(SUM(t.amount), 0)
            FROM transactions t
            JOIN merchants m ON m.merchant_id = t.merchant_id
            WHERE t.user_id = $1
            AND t.type = $2
            AND t.status = $3
            AND to_char(t.created_at AT TIME ZONE $6::text, 'YYYY-MM') = $4
            AND ($5::text IS NULL OR LOWER(m.category) = LOWER($5))
        """, user_id, TransactionType.PAYMENT.value, TransactionStatus.OK.value,
            month, category, tz)
        return Decimal(total)
