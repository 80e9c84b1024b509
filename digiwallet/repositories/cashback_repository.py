from typing import List
from ..models.cashback import CashbackRule

class CashbackRuleRepository:
    async def active_rules(self, conn) -> List[CashbackRule]:
        rows = await conn.fetch("""
            SELECT * FROM cashback_rules
            WHERE active = TRUE
            ORDER BY rule_type, category, rule_id
        """)
        return [CashbackRule.model_validate(dict(r)) for r in rows]
