import json
import logging
import math
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Optional
from pydantic import ValidationError
from ..config import Config
from ..exceptions import InsufficientFundsError, WalletNotFoundError
from ..models.qr import QRPayload
from ..models.wallet import Transaction, TransactionMeta, TransactionType
from ..utils.money import parse_amount
from .ledger import Ledger
from .qr_directory import QRCodeDirectory

class PaymentService:
    """Transfers, merchant payments, top-ups and QR payments.

    Each operation is one atomic bundle on a single connection: the wallet
    mutation(s) and their transaction record(s) commit together or not at all.
    Expected domain failures come back as ``{"success": False, "message": ...}``;
    storage errors propagate to the caller.
    """

    def __init__(self, db, repos, ledger: Optional[Ledger] = None, cashback_service=None,
                 qr_directory: Optional[QRCodeDirectory] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.repos = repos
        self.ledger = ledger or Ledger(repos)
        self.cashback_service = cashback_service
        self.qr_directory = qr_directory or QRCodeDirectory(currency=Config.CURRENCY)
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logging.getLogger(__name__)

    async def transfer_money(self, from_user_id: str, to_user_id: str, amount: Any) -> Dict[str, Any]:
        """Move funds between two users' wallets"""
        if not from_user_id or not to_user_id:
            return {"success": False, "message": "Sender and receiver user ids are required"}

        if from_user_id == to_user_id:
            return {"success": False, "message": "You cannot send money to yourself"}

        value = parse_amount(amount)
        if value is None:
            return {"success": False, "message": "Enter a valid amount"}

        async with self.db.pool.acquire() as conn:
            from_wallet = await self.repos.wallets.get(conn, from_user_id)
            if not from_wallet:
                return {"success": False, "message": "Sender wallet not found"}

            to_wallet = await self.repos.wallets.get(conn, to_user_id)
            if not to_wallet:
                return {"success": False, "message": "Receiver wallet not found"}

            if not from_wallet.has_sufficient_funds(value):
                return {"success": False, "message": "Insufficient balance"}

            try:
                async with conn.transaction():
                    out_tx, in_tx = await self.ledger.transfer(conn, from_user_id, to_user_id, value)
            except InsufficientFundsError as e:
                self.logger.warning(f"Transfer rejected inside bundle: {e}")
                return {"success": False, "message": "Insufficient balance"}
            except WalletNotFoundError as e:
                self.logger.warning(f"Transfer rejected inside bundle: {e}")
                side = "Sender" if e.user_id == from_user_id else "Receiver"
                return {"success": False, "message": f"{side} wallet not found"}

        return {
            "success": True,
            "message": "Transfer successful",
            "data": {
                "out_transaction_id": out_tx.tx_id,
                "in_transaction_id": in_tx.tx_id,
                "amount": value,
                "from_user_id": from_user_id,
                "to_user_id": to_user_id
            }
        }

    async def process_payment(self, user_id: str, merchant_id: str, amount: Any,
                              meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Pay a merchant from the user's wallet.

        Cashback is not evaluated here; callers chain it after the commit.
        ``new_balance`` is computed from the balance read before the debit.
        """
        if not user_id or not merchant_id:
            return {"success": False, "message": "User and merchant ids are required"}

        value = parse_amount(amount)
        if value is None:
            return {"success": False, "message": "Enter a valid amount"}

        async with self.db.pool.acquire() as conn:
            wallet = await self.repos.wallets.get(conn, user_id)
            if not wallet:
                return {"success": False, "message": "User wallet not found"}

            merchant = await self.repos.merchants.get(conn, merchant_id)
            if not merchant:
                return {"success": False, "message": "Merchant not found"}

            if not wallet.has_sufficient_funds(value):
                return {"success": False, "message": "Insufficient balance"}

            try:
                async with conn.transaction():
                    tx, _ = await self.ledger.debit(
                        conn, user_id, value, TransactionType.PAYMENT, "TX_PAY",
                        merchant_id=merchant_id,
                        meta=TransactionMeta(payment_method="wallet", **(meta or {}))
                    )
            except InsufficientFundsError:
                return {"success": False, "message": "Insufficient balance"}
            except WalletNotFoundError:
                return {"success": False, "message": "User wallet not found"}

        self.logger.info(f"Payment {tx.tx_id}: {user_id} paid {value} to {merchant_id}")
        return {
            "success": True,
            "message": "Payment successful",
            "data": {
                "transaction_id": tx.tx_id,
                "amount": value,
                "merchant_id": merchant_id,
                "merchant_name": merchant.name,
                "new_balance": wallet.balance - value
            }
        }

    async def top_up_wallet(self, user_id: str, amount: Any, method: str = "bank_transfer") -> Dict[str, Any]:
        """Add funds to the user's wallet"""
        value = parse_amount(amount)
        if value is None:
            return {"success": False, "message": "Enter a valid amount"}

        async with self.db.pool.acquire() as conn:
            wallet = await self.repos.wallets.get(conn, user_id)
            if not wallet:
                return {"success": False, "message": "User wallet not found"}

            async with conn.transaction():
                tx, balance = await self.ledger.credit(
                    conn, user_id, value, TransactionType.TOPUP, "TX_TOP",
                    meta=TransactionMeta(method=method)
                )

        self.logger.info(f"Top-up {tx.tx_id}: {value} to {user_id}")
        return {
            "success": True,
            "message": "Top-up successful",
            "data": {
                "transaction_id": tx.tx_id,
                "amount": value,
                "new_balance": balance
            }
        }

    async def get_wallet_balance(self, user_id: str) -> Dict[str, Any]:
        async with self.db.pool.acquire() as conn:
            wallet = await self.repos.wallets.get(conn, user_id)

        if not wallet:
            return {"success": False, "message": "Wallet not found"}

        return {
            "success": True,
            "data": {
                "balance": wallet.balance,
                "currency": wallet.currency,
                "formatted_balance": wallet.formatted_balance,
                "updated_at": wallet.updated_at
            }
        }

    async def get_transaction_history(self, user_id: str, page: int = 1,
                                      page_size: int = 20) -> Dict[str, Any]:
        """Newest-first page of the user's transactions"""
        page = max(int(page), 1)
        page_size = min(max(int(page_size), 1), 100)

        async with self.db.pool.acquire() as conn:
            items, total = await self.repos.transactions.history(conn, user_id, page, page_size)

        return {
            "success": True,
            "data": {
                "transactions": [
                    {
                        "tx_id": tx.tx_id,
                        "type": tx.type.value,
                        "amount": tx.amount,
                        "formatted_amount": f"{tx.amount:.2f} {tx.currency}",
                        "description": self.describe_transaction(tx, merchant_name),
                        "merchant_id": tx.merchant_id,
                        "merchant_name": merchant_name,
                        "status": tx.status.value,
                        "created_at": tx.created_at
                    }
                    for tx, merchant_name in items
                ],
                "pagination": {
                    "page": page,
                    "page_size": page_size,
                    "total": total,
                    "total_pages": math.ceil(total / page_size) if total else 0
                }
            }
        }

    @staticmethod
    def describe_transaction(tx: Transaction, merchant_name: Optional[str] = None) -> str:
        if tx.meta.description:
            return tx.meta.description

        if tx.type == TransactionType.TRANSFER_IN:
            return f"Received from {tx.meta.from_user}" if tx.meta.from_user else "Money received"
        if tx.type == TransactionType.TRANSFER_OUT:
            return f"Sent to {tx.meta.to_user}" if tx.meta.to_user else "Money sent"
        if tx.type == TransactionType.PAYMENT:
            return f"{merchant_name} - Payment" if merchant_name else "Payment"
        if tx.type == TransactionType.TOPUP:
            return "Wallet top-up"
        if tx.type in (TransactionType.BILL_SPLIT, TransactionType.SPLIT_SETTLEMENT):
            return "Bill split payment"
        if tx.type == TransactionType.REFUND:
            return "Refund"
        if tx.type == TransactionType.CASHBACK:
            return "Cashback earned"
        return "Transaction"

    def get_qr_info(self, qr_id: str) -> Optional[Dict[str, Any]]:
        return self.qr_directory.get(qr_id)

    async def process_qr_payment(self, user_id: str, qr_data: Any) -> Dict[str, Any]:
        """Pay with a scanned QR payload (JSON string or dict) and chain cashback"""
        if isinstance(qr_data, str):
            try:
                qr_data = json.loads(qr_data)
            except ValueError:
                return {"success": False, "message": "Invalid QR code format"}

        if not isinstance(qr_data, dict):
            return {"success": False, "message": "Invalid QR code format"}

        try:
            qr = QRPayload.model_validate(qr_data)
        except ValidationError:
            return {"success": False, "message": "QR code data is missing or invalid"}

        amount = parse_amount(qr.amount)
        if amount is None:
            return {"success": False, "message": "Invalid amount"}

        if qr.ts and self.clock() - qr.ts > timedelta(hours=Config.QR_MAX_AGE_HOURS):
            return {"success": False, "message": "QR code has expired"}

        result = await self.process_payment(
            user_id, qr.merchant_id, amount, meta={"qr_id": qr.qr_id}
        )
        if not result["success"]:
            return result

        data = dict(result["data"], qr_id=qr.qr_id, merchant_id=qr.merchant_id)
        if self.cashback_service:
            data["cashback"] = await self.cashback_service.reward_payment(
                user_id, qr.merchant_id, amount, data["transaction_id"]
            )

        return {
            "success": True,
            "message": f"QR payment of {amount:.2f} {Config.CURRENCY} successful",
            "data": data
        }
