"""Tests for budget limits, spend aggregation and the monthly summary."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
import pytz

from digiwallet.config import Config
from digiwallet.models import Transaction, TransactionStatus, TransactionType
from digiwallet.services.budget_service import BudgetService, budget_percentage, budget_status


async def _spend(container, db):
    """U1 spends 50 at the cafe and 20 at the market; returns that month"""
    await container.payment_service.process_payment("U1", "M1", 50)
    await container.payment_service.process_payment("U1", "M2", 20)
    paid_at = db.store.state.transactions[-1].created_at
    return paid_at.astimezone(container.budget_service.tz).strftime("%Y-%m")


class TestBudgetStatus:

    @pytest.mark.parametrize("spent, expected", [
        ("0", "good"),
        ("79.9", "good"),
        ("80", "warning"),
        ("94.9", "warning"),
        ("95", "danger"),
        ("150", "danger"),
    ])
    def test_thresholds(self, spent, expected):
        assert budget_status(Decimal(spent), Decimal("100")) == expected

    def test_percentage_one_decimal(self):
        assert budget_percentage(Decimal("50"), Decimal("180")) == Decimal("27.8")

    def test_percentage_of_empty_total(self):
        assert budget_percentage(Decimal("50"), Decimal("0")) == Decimal(0)


class TestSetAndDeleteBudget:

    @pytest.mark.asyncio
    async def test_create_then_update(self, container, db):
        service = container.budget_service

        created = await service.set_budget("U1", "2025-10", "cafe", 200)
        updated = await service.set_budget("U1", "2025-10", "cafe", "250.50")

        assert created["message"] == "Budget created"
        assert updated["message"] == "Budget updated"
        assert db.store.state.budgets[("U1", "2025-10", "cafe")].limit_amount == Decimal("250.50")

    @pytest.mark.asyncio
    async def test_category_is_case_insensitive(self, container, db):
        result = await container.budget_service.set_budget("U1", "2025-10", "Market", 100)

        assert result["data"]["category"] == "market"
        assert ("U1", "2025-10", "market") in db.store.state.budgets

    @pytest.mark.asyncio
    @pytest.mark.parametrize("month, category, limit, message", [
        ("2025-10", "shoes", 100, "Invalid category"),
        ("2025-13", "cafe", 100, "Month must be in YYYY-MM format"),
        ("Oct 2025", "cafe", 100, "Month must be in YYYY-MM format"),
        ("2025-10", "cafe", 0, "Enter a valid budget limit"),
        ("2025-10", "cafe", "lots", "Enter a valid budget limit"),
        ("", "cafe", 100, "All fields are required"),
    ])
    async def test_validation(self, container, db, month, category, limit, message):
        result = await container.budget_service.set_budget("U1", month, category, limit)

        assert result == {"success": False, "message": message}
        assert db.store.state.budgets == {}

    @pytest.mark.asyncio
    async def test_delete(self, container, db):
        service = container.budget_service
        await service.set_budget("U1", "2025-10", "cafe", 200)

        deleted = await service.delete_budget("U1", "2025-10", "cafe")
        missing = await service.delete_budget("U1", "2025-10", "cafe")

        assert deleted["success"] is True
        assert missing == {"success": False, "message": "Budget not found"}

    @pytest.mark.asyncio
    async def test_months_newest_first(self, container):
        service = container.budget_service
        for month in ("2025-09", "2025-11", "2025-10"):
            await service.set_budget("U1", month, "cafe", 100)
        await service.set_budget("U1", "2025-10", "market", 100)

        result = await service.get_user_budget_months("U1")

        assert result["data"]["months"] == ["2025-11", "2025-10", "2025-09"]


class TestBudgetSpending:

    @pytest.mark.asyncio
    async def test_spend_is_computed_from_payments(self, container, db):
        month = await _spend(container, db)
        await container.budget_service.set_budget("U1", month, "cafe", 200)
        await container.budget_service.set_budget("U1", month, "market", 21)

        result = await container.budget_service.get_user_budgets("U1", month)
        budgets = {b["category"]: b for b in result["data"]["budgets"]}

        assert budgets["cafe"]["spent_amount"] == Decimal("50.00")
        assert budgets["cafe"]["remaining"] == Decimal("150.00")
        assert budgets["cafe"]["percentage"] == Decimal("25.0")
        assert budgets["cafe"]["status"] == "good"
        assert budgets["market"]["status"] == "danger"

    @pytest.mark.asyncio
    async def test_other_months_and_failed_payments_are_ignored(self, container, db):
        month = await _spend(container, db)
        db.store.state.transactions.append(Transaction(
            tx_id="TX_FAILED", user_id="U1", amount=Decimal("99"),
            type=TransactionType.PAYMENT, status=TransactionStatus.FAILED, merchant_id="M1",
        ))
        await container.budget_service.set_budget("U1", month, "cafe", 200)
        await container.budget_service.set_budget("U1", "1999-01", "cafe", 200)

        current = await container.budget_service.get_user_budgets("U1", month)
        old = await container.budget_service.get_user_budgets("U1", "1999-01")

        assert current["data"]["budgets"][0]["spent_amount"] == Decimal("50.00")
        assert old["data"]["budgets"][0]["spent_amount"] == Decimal(0)

    @pytest.mark.asyncio
    async def test_other_users_spend_is_ignored(self, container, db):
        month = await _spend(container, db)
        await container.budget_service.set_budget("U2", month, "cafe", 100)

        result = await container.budget_service.get_user_budgets("U2", month)

        assert result["data"]["budgets"][0]["spent_amount"] == Decimal(0)

    @pytest.mark.asyncio
    async def test_bad_month(self, container):
        result = await container.budget_service.get_user_budgets("U1", "2025/10")

        assert result["success"] is False


class TestBudgetSummary:

    @pytest.mark.asyncio
    async def test_summary_uses_wallet_balance_as_total(self, container, db, repos):
        month = await _spend(container, db)
        paid_at = db.store.state.transactions[-1].created_at
        service = BudgetService(db, repos, clock=lambda: paid_at)
        await service.set_budget("U1", month, "cafe", 200)

        result = await service.get_budget_summary("U1")
        data = result["data"]

        assert data["month"] == month
        assert data["total_budget"] == Decimal("180.00")
        assert data["total_spent"] == Decimal("50.00")
        assert data["total_remaining"] == Decimal("130.00")
        assert data["percentage"] == Decimal("27.8")
        assert data["total_month_spending"] == Decimal("70.00")

    @pytest.mark.asyncio
    async def test_summary_without_budgets(self, db, repos):
        service = BudgetService(db, repos)

        result = await service.get_budget_summary("U3")

        assert result["data"]["total_budget"] == Decimal("30.00")
        assert result["data"]["total_spent"] == Decimal(0)
        assert result["data"]["budgets"] == []


class TestMonthBoundaries:

    @pytest.fixture
    def istanbul(self, monkeypatch):
        monkeypatch.setattr(Config, "TIMEZONE", "Europe/Istanbul")
        return pytz.timezone("Europe/Istanbul")

    @pytest.mark.asyncio
    async def test_payment_after_local_midnight_counts_for_the_new_month(self, db, repos, istanbul):
        # 02:30 on 1 November in Istanbul is still 31 October in UTC
        paid_at = istanbul.localize(datetime(2025, 11, 1, 2, 30))
        db.store.state.transactions.append(Transaction(
            tx_id="TX_PAY_NIGHT", user_id="U1", amount=Decimal("40.00"),
            type=TransactionType.PAYMENT, merchant_id="M1",
            created_at=paid_at.astimezone(timezone.utc),
        ))
        service = BudgetService(db, repos, clock=lambda: paid_at)
        await service.set_budget("U1", "2025-11", "cafe", 100)
        await service.set_budget("U1", "2025-10", "cafe", 100)

        summary = await service.get_budget_summary("U1")
        october = await service.get_user_budgets("U1", "2025-10")

        assert summary["data"]["month"] == "2025-11"
        assert summary["data"]["total_spent"] == Decimal("40.00")
        assert summary["data"]["total_month_spending"] == Decimal("40.00")
        assert october["data"]["budgets"][0]["spent_amount"] == Decimal(0)

    @pytest.mark.asyncio
    async def test_utc_clock_is_read_in_business_time_zone(self, db, repos, istanbul):
        service = BudgetService(db, repos, clock=lambda: datetime(2025, 10, 31, 22, 0, tzinfo=timezone.utc))

        assert service.current_month() == "2025-11"
