import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional
import pytz
from ..config import Config
from ..models.cashback import ANY_CATEGORY, CashbackRule, CashbackRuleType
from ..models.user import Merchant
from ..models.wallet import TransactionMeta, TransactionType
from ..utils.money import round_money
from .ledger import Ledger

class CashbackService:
    """Post-payment cashback rules.

    A rule applies when it is active, its category is the merchant's or
    ``any``, today lies inside its optional window, and, for first-time-only
    rules, the user holds no earlier cashback record tagged with its id.
    Every applied rule credits the wallet with its own cashback record.
    """

    def __init__(self, db, repos, ledger: Optional[Ledger] = None,
                 today: Optional[Callable[[], date]] = None):
        self.db = db
        self.repos = repos
        self.ledger = ledger or Ledger(repos)
        self.tz = pytz.timezone(Config.TIMEZONE)
        self.today = today or (lambda: datetime.now(self.tz).date())
        self.logger = logging.getLogger(__name__)

    async def calculate_and_apply_cashback(self, user_id: str, merchant_id: str,
                                           amount: Decimal, payment_tx_id: str) -> Dict[str, Any]:
        async with self.db.pool.acquire() as conn:
            merchant = await self.repos.merchants.get(conn, merchant_id)
            if not merchant:
                return {"cashback_amount": Decimal(0), "applied": False,
                        "applied_rules": [], "message": "Merchant not found"}

            async with conn.transaction():
                rules = await self.get_applicable_rules(conn, user_id, merchant.category)
                if not rules:
                    return {"cashback_amount": Decimal(0), "applied": False,
                            "applied_rules": [], "message": "No cashback campaign applies"}

                total = Decimal(0)
                applied_rules = []
                for rule in rules:
                    cashback = self.calculate_cashback_amount(rule, amount)
                    if cashback <= 0:
                        continue

                    description = self.describe_cashback(rule, merchant)
                    tx, _ = await self.ledger.credit(
                        conn, user_id, cashback, TransactionType.CASHBACK, "TX_CB",
                        merchant_id=merchant_id,
                        meta=TransactionMeta(
                            rule_id=rule.rule_id,
                            original_tx_id=payment_tx_id,
                            description=description
                        )
                    )
                    total += cashback
                    applied_rules.append({
                        "rule_id": rule.rule_id,
                        "transaction_id": tx.tx_id,
                        "amount": cashback,
                        "description": description
                    })

        if total > 0:
            self.logger.info(f"Cashback {total} credited to {user_id} for {payment_tx_id}")

        return {
            "cashback_amount": total,
            "applied": total > 0,
            "applied_rules": applied_rules,
            "message": (f"You earned {total:.2f} {Config.CURRENCY} cashback!"
                        if total > 0 else "Cashback could not be applied")
        }

    async def reward_payment(self, user_id: str, merchant_id: str,
                             amount: Decimal, payment_tx_id: str) -> Dict[str, Any]:
        """Cashback step chained after a committed payment.

        The payment stands whatever happens here, so failures are logged and
        reported as zero cashback.
        """
        try:
            return await self.calculate_and_apply_cashback(user_id, merchant_id, amount, payment_tx_id)
        except Exception:
            self.logger.exception(f"Cashback evaluation failed for {payment_tx_id}")
            return {"cashback_amount": Decimal(0), "applied": False,
                    "applied_rules": [], "message": "Cashback could not be calculated"}

    async def get_applicable_rules(self, conn, user_id: str, category: str) -> List[CashbackRule]:
        today = self.today()
        rules = []
        for rule in await self.repos.cashback_rules.active_rules(conn):
            if not rule.matches_category(category) or not rule.is_running(today):
                continue
            if rule.first_time_only and await self.repos.transactions.has_cashback_for_rule(
                    conn, user_id, rule.rule_id):
                continue
            rules.append(rule)
        return rules

    @staticmethod
    def calculate_cashback_amount(rule: CashbackRule, amount: Decimal) -> Decimal:
        if rule.rule_type == CashbackRuleType.PERCENT:
            cashback = Decimal(amount) * rule.rate
            if rule.cap is not None and cashback > rule.cap:
                cashback = rule.cap
        elif rule.rule_type == CashbackRuleType.FLAT:
            cashback = rule.flat_amount
        else:
            cashback = Decimal(0)
        return round_money(cashback)

    @staticmethod
    def describe_cashback(rule: CashbackRule, merchant: Merchant) -> str:
        if rule.rule_type == CashbackRuleType.PERCENT:
            return f"{merchant.name} - {rule.rate * 100:.0f}% cashback"
        if rule.first_time_only:
            return f"First payment bonus - {rule.flat_amount:.2f} {Config.CURRENCY}"
        return f"{merchant.name} - {rule.flat_amount:.2f} {Config.CURRENCY} cashback"

    @staticmethod
    def describe_campaign(rule: CashbackRule) -> str:
        if rule.rule_type == CashbackRuleType.PERCENT:
            where = "on every category" if rule.category == ANY_CATEGORY else f"at {rule.category} merchants"
            cap = f" (max {rule.cap:.2f} {Config.CURRENCY})" if rule.cap is not None else ""
            return f"{rule.rate * 100:.0f}% back {where}{cap}"
        if rule.first_time_only:
            return f"{rule.flat_amount:.2f} {Config.CURRENCY} bonus on your first payment"
        return f"{rule.flat_amount:.2f} {Config.CURRENCY} flat cashback"

    async def get_active_campaigns(self) -> Dict[str, Any]:
        today = self.today()
        async with self.db.pool.acquire() as conn:
            rules = await self.repos.cashback_rules.active_rules(conn)

        return {
            "success": True,
            "data": {
                "campaigns": [
                    {
                        "rule_id": r.rule_id,
                        "type": r.rule_type.value,
                        "category": r.category,
                        "rate": r.rate,
                        "flat_amount": r.flat_amount,
                        "cap": r.cap,
                        "first_time_only": r.first_time_only,
                        "starts_at": r.starts_at,
                        "ends_at": r.ends_at,
                        "description": self.describe_campaign(r)
                    }
                    for r in rules if r.is_running(today)
                ]
            }
        }
