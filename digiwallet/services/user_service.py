from typing import List, Dict, Optional, Any

class UserService:
    def __init__(self, db, repos):
        self.db = db
        self.repos = repos

    async def authenticate_by_id(self, user_id: Any) -> Dict[str, Any]:
        """Log in with a bare user id"""
        if not user_id or not isinstance(user_id, str):
            return {"success": False, "message": "A valid user id is required"}

        async with self.db.pool.acquire() as conn:
            user = await self.repos.users.get(conn, user_id)

        if not user:
            return {"success": False, "message": "User not found"}

        return {
            "success": True,
            "message": "Login successful",
            "data": {"user": user.model_dump()}
        }

    async def get_user_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """User fields plus wallet balance"""
        async with self.db.pool.acquire() as conn:
            user = await self.repos.users.get(conn, user_id)
            if not user:
                return None
            wallet = await self.repos.wallets.get(conn, user_id)

        profile = user.model_dump()
        profile["balance"] = wallet.balance if wallet else None
        profile["currency"] = wallet.currency if wallet else None
        return profile

    async def search_users(self, current_user_id: str, term: Optional[str]) -> List[Dict[str, Any]]:
        """Exact id match first, then name substring; never returns the caller"""
        term = (term or "").strip()
        if not term:
            return []

        async with self.db.pool.acquire() as conn:
            user = await self.repos.users.get(conn, term)
            if user and user.user_id != current_user_id:
                return [user.model_dump()]

            users = await self.repos.users.search_by_name(conn, term)

        return [u.model_dump() for u in users if u.user_id != current_user_id]

    async def get_contacts(self, user_id: str) -> List[Dict[str, Any]]:
        """Saved transfer contacts, favorites first"""
        async with self.db.pool.acquire() as conn:
            return await self.repos.users.get_contacts(conn, user_id)
