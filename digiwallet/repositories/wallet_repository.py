from decimal import Decimal
from typing import Optional
from ..exceptions import InsufficientFundsError, WalletNotFoundError
from ..models.wallet import Wallet

class WalletRepository:
    """Balance reads and guarded balance writes"""

    async def get(self, conn, user_id: str) -> Optional[Wallet]:
        row = await conn.fetchrow("""
            SELECT * FROM wallets WHERE user_id = $1
        """, user_id)
        return Wallet.model_validate(dict(row)) if row else None

    async def credit(self, conn, user_id: str, amount: Decimal) -> Decimal:
        """Add amount; returns the new balance"""
        balance = await conn.fetchval("""
            UPDATE wallets
            SET balance = ROUND(balance + $2, 2), updated_at = NOW()
            WHERE user_id = $1
            RETURNING balance
        """, user_id, amount)
        if balance is None:
            raise WalletNotFoundError(user_id)
        return balance

    async def debit(self, conn, user_id: str, amount: Decimal) -> Decimal:
        """Subtract amount unless that would go below zero; returns the new balance"""
        balance = await conn.fetchval("""
            UPDATE wallets
            SET balance = ROUND(balance - $2, 2), updated_at = NOW()
            WHERE user_id = $1 AND balance >= $2
            RETURNING balance
        """, user_id, amount)
        if balance is None:
            if await self.get(conn, user_id) is None:
                raise WalletNotFoundError(user_id)
            raise InsufficientFundsError(user_id, amount)
        return balance
