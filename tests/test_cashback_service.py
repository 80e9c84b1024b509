"""Tests for cashback rule matching, amounts, gating and campaign listing."""

from datetime import date
from decimal import Decimal

import pytest

from digiwallet.models import CashbackRule, CashbackRuleType, TransactionType
from digiwallet.services.cashback_service import CashbackService

from tests.fakes import TODAY, balance, first_time_bonus, transactions_of


def _percent_rule(**overrides):
    fields = dict(
        rule_id="P", rule_type=CashbackRuleType.PERCENT, category="cafe",
        rate=Decimal("0.05"), cap=Decimal("20"),
    )
    fields.update(overrides)
    return CashbackRule(**fields)


# ──────────────────────────────────────────────────────────
# Amount calculation
# ──────────────────────────────────────────────────────────

class TestCalculateCashbackAmount:

    def test_percent(self):
        assert CashbackService.calculate_cashback_amount(_percent_rule(), Decimal("20")) == Decimal("1.00")

    def test_percent_is_capped(self):
        assert CashbackService.calculate_cashback_amount(_percent_rule(), Decimal("1000")) == Decimal("20")

    def test_zero_cap_pays_nothing(self):
        rule = _percent_rule(cap=Decimal("0"))
        assert CashbackService.calculate_cashback_amount(rule, Decimal("1000")) == Decimal("0.00")

    def test_percent_without_cap(self):
        rule = _percent_rule(cap=None)
        assert CashbackService.calculate_cashback_amount(rule, Decimal("1000")) == Decimal("50.00")

    def test_percent_rounds_half_up(self):
        assert CashbackService.calculate_cashback_amount(_percent_rule(), Decimal("25.50")) == Decimal("1.28")

    def test_flat(self):
        assert CashbackService.calculate_cashback_amount(first_time_bonus(), Decimal("3")) == Decimal("20.00")


class TestRuleMatching:

    def test_category_match(self):
        rule = _percent_rule()
        assert rule.matches_category("cafe")
        assert not rule.matches_category("market")

    def test_any_category(self):
        assert first_time_bonus().matches_category("market")

    def test_window(self):
        rule = _percent_rule(starts_at=date(2025, 10, 1), ends_at=date(2025, 10, 31))
        assert rule.is_running(date(2025, 10, 1))
        assert rule.is_running(date(2025, 10, 31))
        assert not rule.is_running(date(2025, 9, 30))
        assert not rule.is_running(date(2025, 11, 1))

    def test_inactive_rule_never_runs(self):
        assert not _percent_rule(active=False).is_running(TODAY)


# ──────────────────────────────────────────────────────────
# Applying cashback
# ──────────────────────────────────────────────────────────

class TestApplyCashback:

    @pytest.mark.asyncio
    async def test_cashback_record_carries_rule_and_payment(self, container, db):
        result = await container.cashback_service.calculate_and_apply_cashback(
            "U1", "M1", Decimal("40"), "TX_PAY_1"
        )

        assert result["applied"] is True
        assert result["cashback_amount"] == Decimal("2.00")
        assert balance(db, "U1") == Decimal("252.00")

        tx = transactions_of(db, "U1")[0]
        assert tx.type == TransactionType.CASHBACK
        assert tx.merchant_id == "M1"
        assert tx.meta.rule_id == "CB1"
        assert tx.meta.original_tx_id == "TX_PAY_1"
        assert tx.meta.description == "Campus Cafe - 5% cashback"
        assert result["applied_rules"][0]["transaction_id"] == tx.tx_id

    @pytest.mark.asyncio
    async def test_no_rule_for_category(self, container, db):
        result = await container.cashback_service.calculate_and_apply_cashback(
            "U1", "M2", Decimal("40"), "TX_PAY_1"
        )

        assert result["applied"] is False
        assert result["cashback_amount"] == Decimal(0)
        assert db.store.state.transactions == []

    @pytest.mark.asyncio
    async def test_unknown_merchant(self, container):
        result = await container.cashback_service.calculate_and_apply_cashback(
            "U1", "M9", Decimal("40"), "TX_PAY_1"
        )

        assert result["applied"] is False
        assert result["message"] == "Merchant not found"

    @pytest.mark.asyncio
    async def test_outside_campaign_window(self, db, repos):
        service = CashbackService(db, repos, today=lambda: date(2026, 1, 1))

        result = await service.calculate_and_apply_cashback("U1", "M1", Decimal("40"), "TX_PAY_1")

        assert result["applied"] is False
        assert balance(db, "U1") == Decimal("250.00")

    @pytest.mark.asyncio
    async def test_several_rules_each_get_a_record(self, container, db):
        db.store.state.rules.append(first_time_bonus())

        result = await container.cashback_service.calculate_and_apply_cashback(
            "U1", "M1", Decimal("20"), "TX_PAY_1"
        )

        assert result["cashback_amount"] == Decimal("21.00")
        assert sorted(r["rule_id"] for r in result["applied_rules"]) == ["CB1", "CB2"]
        assert len(transactions_of(db, "U1")) == 2

    @pytest.mark.asyncio
    async def test_first_time_rule_fires_once(self, container, db):
        db.store.state.rules.append(first_time_bonus())
        service = container.cashback_service

        first = await service.calculate_and_apply_cashback("U2", "M2", Decimal("10"), "TX_A")
        second = await service.calculate_and_apply_cashback("U2", "M2", Decimal("10"), "TX_B")

        assert first["cashback_amount"] == Decimal("20.00")
        assert second["applied"] is False
        assert balance(db, "U2") == Decimal("110.00")

    @pytest.mark.asyncio
    async def test_first_time_gating_is_per_user(self, container, db):
        db.store.state.rules.append(first_time_bonus())
        service = container.cashback_service

        await service.calculate_and_apply_cashback("U2", "M2", Decimal("10"), "TX_A")
        other = await service.calculate_and_apply_cashback("U3", "M2", Decimal("10"), "TX_B")

        assert other["cashback_amount"] == Decimal("20.00")

    @pytest.mark.asyncio
    async def test_partial_failure_credits_nothing(self, container, db, repos, monkeypatch):
        db.store.state.rules.append(first_time_bonus())
        original_insert = repos.transactions.insert
        calls = []

        async def insert_then_fail(conn, tx):
            calls.append(tx)
            if len(calls) == 2:
                raise RuntimeError("disk full")
            await original_insert(conn, tx)

        monkeypatch.setattr(repos.transactions, "insert", insert_then_fail)

        with pytest.raises(RuntimeError):
            await container.cashback_service.calculate_and_apply_cashback(
                "U1", "M1", Decimal("20"), "TX_PAY_1"
            )

        assert balance(db, "U1") == Decimal("250.00")
        assert db.store.state.transactions == []


class TestRewardPayment:

    @pytest.mark.asyncio
    async def test_failure_reports_zero_and_keeps_payment(self, container, db, repos, monkeypatch):
        payment = await container.payment_service.process_payment("U1", "M1", 20)

        async def broken(conn):
            raise RuntimeError("rules table locked")

        monkeypatch.setattr(repos.cashback_rules, "active_rules", broken)

        result = await container.cashback_service.reward_payment(
            "U1", "M1", Decimal("20"), payment["data"]["transaction_id"]
        )

        assert result["applied"] is False
        assert result["cashback_amount"] == Decimal(0)
        assert balance(db, "U1") == Decimal("230.00")


# ──────────────────────────────────────────────────────────
# Campaign listing
# ──────────────────────────────────────────────────────────

class TestActiveCampaigns:

    @pytest.mark.asyncio
    async def test_lists_running_rules_with_descriptions(self, container, db):
        db.store.state.rules.append(first_time_bonus())

        result = await container.cashback_service.get_active_campaigns()
        campaigns = {c["rule_id"]: c for c in result["data"]["campaigns"]}

        assert set(campaigns) == {"CB1", "CB2"}
        assert campaigns["CB1"]["description"].startswith("5% back at cafe merchants")
        assert "first payment" in campaigns["CB2"]["description"]

    @pytest.mark.asyncio
    async def test_hides_rules_outside_window(self, db, repos):
        service = CashbackService(db, repos, today=lambda: date(2026, 1, 1))

        result = await service.get_active_campaigns()

        assert result["data"]["campaigns"] == []
