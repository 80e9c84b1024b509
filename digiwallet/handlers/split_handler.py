# digiwallet/handlers/split_handler.py
from telegram import Update
from telegram.ext import ContextTypes
from .base_handler import BaseHandler

class SplitHandler(BaseHandler):
    """Bill split overview and settlement"""

    async def splits(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        user_id = await self.require_user(update, context)
        if not user_id:
            return

        service = self.container.bill_split_service
        summary = await service.get_user_split_summary(user_id)
        pending = await service.get_user_splits(user_id, status="pending")
        splits = pending["data"]["splits"]
        owed = [s for s in splits if s["debtor_user_id"] == user_id]

        await self.reply(
            update,
            self.messages.format_split_summary(summary["data"], splits, user_id),
            reply_markup=self.keyboards.pending_debts(owed)
        )

    async def settle(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """/settle <split_id>"""
        user_id = await self.require_user(update, context)
        if not user_id:
            return

        if len(context.args) != 1 or not context.args[0].isdigit():
            await update.message.reply_text("Usage: /settle <split_id>")
            return

        await self._settle(update, user_id, int(context.args[0]))

    async def settle_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        user_id = await self.require_user(update, context)
        if not user_id:
            return

        split_id = int(update.callback_query.data.split('_')[2])
        await self._settle(update, user_id, split_id)

    async def _settle(self, update: Update, user_id: str, split_id: int):
        result = await self.container.bill_split_service.settle_bill_split(split_id, user_id)
        if not result["success"]:
            await self.reply(update, f"❌ {result['message']}", reply_markup=self.keyboards.back_to_menu())
            return

        data = result["data"]
        await self.reply(
            update,
            f"✅ Paid {data['amount']:.2f} to {data['payer_user_id']} for split #{split_id}",
            reply_markup=self.keyboards.back_to_menu()
        )
