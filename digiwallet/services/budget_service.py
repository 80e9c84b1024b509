import logging
import re
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, Optional
import pytz
from ..config import Config
from ..models.budget import Budget, BUDGET_CATEGORIES
from ..utils.money import parse_amount

MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

# Default display thresholds, in percent of the limit
WARNING_THRESHOLD = Decimal(80)
DANGER_THRESHOLD = Decimal(95)

def budget_percentage(spent: Decimal, limit: Decimal) -> Decimal:
    if not limit or limit <= 0:
        return Decimal(0)
    return (Decimal(spent) / Decimal(limit) * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

def budget_status(spent: Decimal, limit: Decimal) -> str:
    """good below 80%, warning from 80%, danger from 95% of the limit"""
    percentage = Decimal(spent) / Decimal(limit) * 100
    if percentage >= DANGER_THRESHOLD:
        return "danger"
    if percentage >= WARNING_THRESHOLD:
        return "warning"
    return "good"

class BudgetService:
    """Monthly category limits compared with real payment spend.

    Spend is never stored; it is recomputed from ok payment transactions
    joined to their merchant's category.
    """

    def __init__(self, db, repos, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.repos = repos
        self.tz = pytz.timezone(Config.TIMEZONE)
        self.clock = clock or (lambda: datetime.now(self.tz))
        self.logger = logging.getLogger(__name__)

    def current_month(self) -> str:
        return self.clock().astimezone(self.tz).strftime("%Y-%m")

    async def calculate_category_spending(self, user_id: str, month: str, category: str) -> Decimal:
        async with self.db.pool.acquire() as conn:
            return await self.repos.transactions.spending(conn, user_id, month, category, tz=self.tz.zone)

    async def get_user_budgets(self, user_id: str, month: str) -> Dict[str, Any]:
        if not month or not MONTH_PATTERN.match(month):
            return {"success": False, "message": "Month must be in YYYY-MM format"}

        async with self.db.pool.acquire() as conn:
            budgets = await self.repos.budgets.for_month(conn, user_id, month)
            items = []
            for budget in budgets:
                spent = await self.repos.transactions.spending(
                    conn, user_id, month, budget.category, tz=self.tz.zone
                )
                items.append({
                    "category": budget.category,
                    "limit_amount": budget.limit_amount,
                    "spent_amount": spent,
                    "remaining": budget.limit_amount - spent,
                    "percentage": budget_percentage(spent, budget.limit_amount),
                    "status": budget_status(spent, budget.limit_amount)
                })

        return {"success": True, "data": {"month": month, "budgets": items}}

    async def set_budget(self, user_id: str, month: str, category: str, limit_amount: Any) -> Dict[str, Any]:
        """Create or replace the limit for (user, month, category)"""
        if not user_id or not month or not category:
            return {"success": False, "message": "All fields are required"}

        if not MONTH_PATTERN.match(month):
            return {"success": False, "message": "Month must be in YYYY-MM format"}

        limit = parse_amount(limit_amount)
        if limit is None:
            return {"success": False, "message": "Enter a valid budget limit"}

        category = category.lower()
        if category not in BUDGET_CATEGORIES:
            return {"success": False, "message": "Invalid category"}

        budget = Budget(user_id=user_id, month=month, category=category, limit_amount=limit)
        async with self.db.pool.acquire() as conn:
            created = await self.repos.budgets.upsert(conn, budget)

        self.logger.info(f"Budget {month}/{category} for {user_id} set to {limit}")
        return {
            "success": True,
            "message": "Budget created" if created else "Budget updated",
            "data": {"month": month, "category": category, "limit_amount": limit}
        }

    async def delete_budget(self, user_id: str, month: str, category: str) -> Dict[str, Any]:
        if not user_id or not month or not category:
            return {"success": False, "message": "All fields are required"}

        async with self.db.pool.acquire() as conn:
            deleted = await self.repos.budgets.delete(conn, user_id, month, category.lower())

        if not deleted:
            return {"success": False, "message": "Budget not found"}

        self.logger.info(f"Budget {month}/{category} for {user_id} deleted")
        return {"success": True, "message": "Budget deleted"}

    async def get_user_budget_months(self, user_id: str) -> Dict[str, Any]:
        async with self.db.pool.acquire() as conn:
            months = await self.repos.budgets.months(conn, user_id)
        return {"success": True, "data": {"months": months}}

    async def get_budget_summary(self, user_id: str) -> Dict[str, Any]:
        """Current month overview.

        total_budget is the wallet balance, not the sum of the limits.
        """
        month = self.current_month()
        result = await self.get_user_budgets(user_id, month)
        if not result["success"]:
            return result

        budgets = result["data"]["budgets"]
        async with self.db.pool.acquire() as conn:
            wallet = await self.repos.wallets.get(conn, user_id)
            month_spending = await self.repos.transactions.spending(conn, user_id, month, tz=self.tz.zone)

        total_budget = wallet.balance if wallet else Decimal(0)
        total_spent = sum((b["spent_amount"] for b in budgets), Decimal(0))

        return {
            "success": True,
            "data": {
                "month": month,
                "total_budget": total_budget,
                "total_spent": total_spent,
                "total_remaining": total_budget - total_spent,
                "percentage": budget_percentage(total_spent, total_budget),
                "total_month_spending": month_spending,
                "budgets": budgets
            }
        }
