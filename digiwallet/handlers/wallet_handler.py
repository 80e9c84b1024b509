# digiwallet/handlers/wallet_handler.py
import logging
from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler
from ..utils.formatters import format_money

logger = logging.getLogger(__name__)

class WalletHandler(BaseHandler):
    """Login and money movement commands"""

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await update.message.reply_text(
            self.messages.welcome(update.effective_user.first_name),
            reply_markup=self.keyboards.main_menu()
        )

    async def login(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/login <user_id>"""
        if len(context.args) != 1:
            await update.message.reply_text("Usage: /login <user_id>")
            return

        result = await self.container.user_service.authenticate_by_id(context.args[0])
        if not result["success"]:
            await update.message.reply_text(f"❌ {result['message']}")
            return

        old_session = context.chat_data.get("session_id")
        if old_session:
            self.container.sessions.destroy(old_session)

        user = result["data"]["user"]
        context.chat_data["session_id"] = self.container.sessions.create(user["user_id"])
        logger.info(f"Chat {update.effective_chat.id} logged in as {user['user_id']}")
        await update.message.reply_text(
            f"✅ Welcome {user['name']}!",
            reply_markup=self.keyboards.main_menu()
        )

    async def logout(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        session_id = context.chat_data.pop("session_id", None)
        if session_id:
            self.container.sessions.destroy(session_id)
        await update.message.reply_text("👋 Logged out.")

    async def balance(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        user_id = await self.require_user(update, context)
        if not user_id:
            return

        result = await self.container.payment_service.get_wallet_balance(user_id)
        if not result["success"]:
            await self.reply(update, f"❌ {result['message']}")
            return
        await self.reply(update, self.messages.format_balance(result["data"]),
                         reply_markup=self.keyboards.back_to_menu())

    async def history(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        user_id = await self.require_user(update, context)
        if not user_id:
            return

        page = 1
        if context.args and context.args[0].isdigit():
            page = int(context.args[0])

        result = await self.container.payment_service.get_transaction_history(user_id, page, 10)
        await self.reply(update, self.messages.format_history(result["data"]),
                         reply_markup=self.keyboards.back_to_menu())

    async def topup(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/topup <amount>"""
        user_id = await self.require_user(update, context)
        if not user_id:
            return

        if len(context.args) != 1:
            await update.message.reply_text("Usage: /topup <amount>")
            return

        result = await self.container.payment_service.top_up_wallet(user_id, context.args[0])
        if not result["success"]:
            await update.message.reply_text(f"❌ {result['message']}")
            return

        data = result["data"]
        await update.message.reply_text(
            f"✅ Added {format_money(data['amount'])}\n"
            f"💰 New balance: {format_money(data['new_balance'])}"
        )

    async def pay(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/pay <merchant_id> <amount>"""
        user_id = await self.require_user(update, context)
        if not user_id:
            return

        if len(context.args) != 2:
            await update.message.reply_text("Usage: /pay <merchant_id> <amount>")
            return

        merchant_id, amount = context.args
        result = await self.container.payment_service.process_payment(user_id, merchant_id, amount)
        if not result["success"]:
            await update.message.reply_text(f"❌ {result['message']}")
            return

        data = result["data"]
        data["cashback"] = await self.container.cashback_service.reward_payment(
            user_id, merchant_id, data["amount"], data["transaction_id"]
        )
        await update.message.reply_text(self.messages.format_payment(data))

    async def transfer(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/transfer <user_id> <amount>"""
        user_id = await self.require_user(update, context)
        if not user_id:
            return

        if len(context.args) != 2:
            await update.message.reply_text("Usage: /transfer <user_id> <amount>")
            return

        to_user_id, amount = context.args
        result = await self.container.payment_service.transfer_money(user_id, to_user_id, amount)
        if not result["success"]:
            await update.message.reply_text(f"❌ {result['message']}")
            return

        data = result["data"]
        await update.message.reply_text(
            f"✅ Sent {format_money(data['amount'])} to {data['to_user_id']}\n"
            f"🧾 {data['out_transaction_id']}"
        )

    async def qr(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/qr <qr_id>: pay the amount printed on a merchant code"""
        user_id = await self.require_user(update, context)
        if not user_id:
            return

        if len(context.args) != 1:
            await update.message.reply_text("Usage: /qr <qr_id>")
            return

        qr_data = self.container.payment_service.get_qr_info(context.args[0])
        if not qr_data:
            await update.message.reply_text("❌ QR code not found")
            return

        result = await self.container.payment_service.process_qr_payment(user_id, qr_data)
        if not result["success"]:
            await update.message.reply_text(f"❌ {result['message']}")
            return
        await update.message.reply_text(self.messages.format_payment(result["data"]))
