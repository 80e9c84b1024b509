from typing import Any, Dict, List, Optional
from ..models.user import User, Merchant

class UserRepository:
    async def get(self, conn, user_id: str) -> Optional[User]:
        row = await conn.fetchrow("""
            SELECT * FROM users WHERE user_id = $1
        """, user_id)
        return User.model_validate(dict(row)) if row else None

    async def exists(self, conn, user_id: str) -> bool:
        return bool(await conn.fetchval("""
            SELECT EXISTS (SELECT 1 FROM users WHERE user_id = $1)
        """, user_id))

    async def search_by_name(self, conn, term: str) -> List[User]:
        rows = await conn.fetch("""
            SELECT * FROM users
            WHERE name ILIKE '%' || $1 || '%'
            ORDER BY name
        """, term)
        return [User.model_validate(dict(r)) for r in rows]

    async def get_contacts(self, conn, user_id: str) -> List[Dict[str, Any]]:
        rows = await conn.fetch("""
            SELECT u.user_id, u.name, u.phone, pc.favorite
            FROM p2p_contacts pc
            JOIN users u ON u.user_id = pc.contact_user_id
            WHERE pc.user_id = $1
            ORDER BY pc.favorite DESC, u.name
        """, user_id)
        return [dict(r) for r in rows]

class MerchantRepository:
    async def get(self, conn, merchant_id: str) -> Optional[Merchant]:
        row = await conn.fetchrow("""
            SELECT * FROM merchants WHERE merchant_id = $1
        """, merchant_id)
        return Merchant.model_validate(dict(row)) if row else None
