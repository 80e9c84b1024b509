from typing import List
from ..models.budget import Budget

class BudgetRepository:
    async def for_month(self, conn, user_id: str, month: str) -> List[Budget]:
        rows = await conn.fetch("""
            SELECT * FROM budgets
            WHERE user_id = $1 AND month = $2
            ORDER BY category
        """, user_id, month)
        return [Budget.model_validate(dict(r)) for r in rows]

    async def upsert(self, conn, budget: Budget) -> bool:
        """Insert or replace the limit; True when a new row was created"""
        return await conn.fetchval("""
            INSERT INTO budgets (user_id, month, category, limit_amount)
            VALUES ($1, $2, $3, $4)
            ON CONFLICT (user_id, month, category)
            DO UPDATE SET limit_amount = EXCLUDED.limit_amount, updated_at = NOW()
            RETURNING (xmax = 0)
        """, budget.user_id, budget.month, budget.category, budget.limit_amount)

    async def delete(self, conn, user_id: str, month: str, category: str) -> bool:
        result = await conn.execute("""
            DELETE FROM budgets
            WHERE user_id = $1 AND month = $2 AND category = $3
        """, user_id, month, category)
        return result == "DELETE 1"

    async def months(self, conn, user_id: str) -> List[str]:
        rows = await conn.fetch("""
            SELECT DISTINCT month FROM budgets
            WHERE user_id = $1
            ORDER BY month DESC
        """, user_id)
        return [r['month'] for r in rows]
